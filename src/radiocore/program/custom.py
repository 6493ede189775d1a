"""Post-processing chain: metadata insertion, amplification, normalization, crossfade, operator config."""

from __future__ import annotations

import structlog

from ..shared.types import CrossfadeType
from .builder import Assign, Call, Comment, Line, Verbatim, Var
from .context import RADIO, WriteContext

_log = structlog.get_logger(__name__)

DEFAULT_CROSSFADE_SECONDS = 2.0
START_NEXT_FACTOR = 1.5


def crossfade_type(value: object) -> CrossfadeType:
    if value is None:
        return CrossfadeType.NORMAL
    try:
        return CrossfadeType(value)
    except ValueError:
        _log.warning("crossfade_type_unknown", crossfade_type=value)
        return CrossfadeType.NORMAL


def crossfade_statement(backend: dict) -> Assign | None:
    """Crossfade assignment for the station's settings, or None when crossfading is off."""
    kind = crossfade_type(backend.get("crossfade_type"))
    raw = backend.get("crossfade")
    duration = round(float(DEFAULT_CROSSFADE_SECONDS if raw is None else raw), 1)

    if kind is CrossfadeType.DISABLED or duration <= 0:
        return None

    func = "smart_crossfade" if kind is CrossfadeType.SMART else "crossfade"
    return Assign(
        RADIO,
        Call(
            func,
            Var(RADIO),
            start_next=round(duration * START_NEXT_FACTOR, 2),
            fade_out=duration,
            fade_in=duration,
        ),
    )


def write_custom(ctx: WriteContext) -> None:
    backend = ctx.station.backend_settings
    buffer = ctx.buffer

    buffer.append(
        Comment("Allow for Telnet-driven insertion of custom metadata."),
        Assign(RADIO, Call("server.insert_metadata", Var(RADIO), id="custom_metadata")),
        Comment("Apply amplification metadata (if supplied)"),
        Assign(RADIO, Call("amplify", 1.0, Var(RADIO))),
    )

    if backend.get("nrj"):
        buffer.append(
            Comment("Normalization and Compression"),
            Assign(
                RADIO,
                Call("normalize", Var(RADIO), target=0.0, window=0.03, gain_min=-16.0, gain_max=0.0),
            ),
            Assign(RADIO, Call("compress.exponential", Var(RADIO), mu=1.0)),
        )

    if backend.get("enable_replaygain_metadata"):
        buffer.append(
            Comment("Replaygain Metadata"),
            Line(Call("enable_replaygain_metadata")),
        )

    crossfade = crossfade_statement(backend)
    if crossfade is not None:
        buffer.append(crossfade)

    custom_config = backend.get("custom_config")
    if custom_config:
        buffer.append(
            Comment("Custom Configuration (Specified in Station Profile)"),
            Verbatim(custom_config),
        )
