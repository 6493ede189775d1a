"""
Output encoder parameter builder.

Derives the encoder block and connection parameters for one mount or relay.
Each format carries a fixed parameter set; AAC additionally picks its
profile and afterburner flag from the bitrate.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass

from ..domain.entities import Station, StationMount, StationRemote
from ..shared.types import OutputFormat
from .builder import Encoder, Value

DEFAULT_BITRATE = 128
DEFAULT_CHARSET = "UTF-8"

AAC_LC_MIN_BITRATE = 96
AAC_AFTERBURNER_MIN_BITRATE = 160
AAC_PROFILE_LC = "mpeg4_aac_lc"
AAC_PROFILE_HE = "mpeg4_he_aac_v2"


def resolve_format(value: str | OutputFormat | None) -> OutputFormat:
    """Map a stored format name to a known format; anything unknown encodes as MP3."""
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat((value or "").lower())
    except ValueError:
        return OutputFormat.MP3


def aac_profile(bitrate: int) -> tuple[str, bool]:
    """Return ``(profile, afterburner)`` for an AAC stream at ``bitrate`` kbps."""
    profile = AAC_PROFILE_LC if bitrate >= AAC_LC_MIN_BITRATE else AAC_PROFILE_HE
    return profile, bitrate >= AAC_AFTERBURNER_MIN_BITRATE


def build_encoder(fmt: str | OutputFormat | None, bitrate: int | None) -> Encoder:
    """Encoder block for ``fmt`` at ``bitrate`` kbps (default 128)."""
    bitrate = int(bitrate or DEFAULT_BITRATE)
    fmt = resolve_format(fmt)

    if fmt is OutputFormat.AAC:
        profile, afterburner = aac_profile(bitrate)
        return Encoder(
            "fdkaac",
            channels=2,
            samplerate=44100,
            bitrate=bitrate,
            afterburner=afterburner,
            aot=profile,
            sbr_mode=True,
        )

    if fmt is OutputFormat.OGG:
        return Encoder("vorbis.cbr", samplerate=44100, channels=2, bitrate=bitrate)

    if fmt is OutputFormat.OPUS:
        return Encoder(
            "opus",
            samplerate=48000,
            bitrate=bitrate,
            vbr="none",
            application="audio",
            channels=2,
            signal="music",
            complexity=10,
            max_bandwidth="full_band",
        )

    return Encoder("mp3", samplerate=44100, stereo=True, bitrate=bitrate, id3v2=True)


@dataclass(frozen=True)
class ConnectionParams:
    host: str
    port: int
    password: str
    user: str | None = None
    mount: str | None = None


def mount_connection(
    station: Station, target: StationMount | StationRemote, *, public_port: int
) -> ConnectionParams:
    """Connection parameters for a local mount or remote relay.

    Local mounts default to the station's own frontend: loopback host, the
    public stream port, the frontend source password and the mount's name.
    """
    if isinstance(target, StationMount):
        return ConnectionParams(
            host=target.autodj_host or "127.0.0.1",
            port=int(target.autodj_port or public_port),
            password=target.autodj_password or station.frontend_settings.get("source_pw", ""),
            user=target.autodj_username or None,
            mount=target.autodj_mount or target.name,
        )

    return ConnectionParams(
        host=target.autodj_host or "",
        port=int(target.autodj_port or 0),
        password=target.autodj_password or "",
        user=target.autodj_username or None,
        mount=target.autodj_mount or None,
    )


def output_params(
    station: Station,
    target: StationMount | StationRemote,
    *,
    output_id: str,
    public_port: int,
) -> OrderedDict[str, Value]:
    """Labelled parameters of one outbound stream, in emission order."""
    charset = station.backend_settings.get("charset") or DEFAULT_CHARSET
    conn = mount_connection(station, target, public_port=public_port)

    params: OrderedDict[str, Value] = OrderedDict()
    params["id"] = output_id
    params["host"] = conn.host
    params["port"] = conn.port
    if conn.user:
        params["user"] = conn.user
    params["password"] = conn.password
    if conn.mount:
        params["mount"] = conn.mount

    params["name"] = station.name or ""
    params["description"] = station.description or ""
    params["genre"] = station.genre or ""
    if station.url:
        params["url"] = station.url

    params["public"] = bool(target.is_public)
    params["encoding"] = charset
    if target.autodj_shoutcast_mode:
        params["protocol"] = "icy"
    return params
