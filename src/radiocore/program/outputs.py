"""Outbound stream writers: local frontend mounts and remote relays."""

from __future__ import annotations

from collections.abc import Iterable

from ..domain.entities import StationMount, StationRemote
from ..runtime.ports import get_public_port
from ..shared.types import FrontendType
from .builder import Call, Comment, Line, Var
from .context import RADIO, WriteContext
from .encoders import build_encoder, output_params


def output_line(ctx: WriteContext, target: StationMount | StationRemote, output_id: str) -> Line:
    station = ctx.station
    params = output_params(
        station,
        target,
        output_id=station.var_name(output_id),
        public_port=get_public_port(station),
    )
    encoder = build_encoder(target.autodj_format, target.autodj_bitrate)
    return Line(Call("output.icecast", encoder, Var(RADIO), **params))


def _write_targets(
    ctx: WriteContext,
    heading: str,
    targets: Iterable[StationMount | StationRemote],
    prefix: str,
) -> None:
    ctx.buffer.append(Comment(heading))
    # Numbering counts disabled targets too, so ids stay stable when one is toggled.
    for index, target in enumerate(targets, start=1):
        if not target.enable_autodj:
            continue
        ctx.buffer.append(output_line(ctx, target, f"{prefix}_{index}"))


def write_local_outputs(ctx: WriteContext) -> None:
    if ctx.station.frontend_type == FrontendType.REMOTE.value:
        return
    _write_targets(ctx, "Local Broadcasts", ctx.station.mounts, "local")


def write_remote_outputs(ctx: WriteContext) -> None:
    _write_targets(ctx, "Remote Relays", ctx.station.remotes, "relay")
