"""Live DJ input: auth and connect callbacks, harbor input and the live switch."""

from __future__ import annotations

from ..runtime.ports import get_harbor_port
from .builder import Assign, Blank, Call, Comment, Def, Deref, Line, ListOf, Pair, Raw, Thunk, Var
from .callbacks import api_command
from .context import RADIO, WriteContext

LIVE_FLAG = "live_enabled"
LIVE = "live"

DEFAULT_DJ_BUFFER = 5
HARBOR_MAX_SECONDS = 30.0
SILENCE_PAD_SECONDS = 2.0


def _log(text: str) -> Line:
    # Engine-side string interpolation, so the text is emitted as written.
    return Line(Call("log", Raw(f'"{text}"')))


def write_harbor(ctx: WriteContext) -> None:
    station = ctx.station
    if not station.enable_streamers:
        return

    backend = station.backend_settings
    charset = backend.get("charset") or "UTF-8"
    mount = backend.get("dj_mount_point") or "/"
    dj_buffer = int(backend.get("dj_buffer") or DEFAULT_DJ_BUFFER)
    base_url = ctx.settings.internal_api_url

    ctx.buffer.append(
        Comment("DJ Authentication"),
        Def(
            "dj_auth",
            ["user", "password"],
            [
                _log("Authenticating DJ: #{user}"),
                Assign(
                    "ret",
                    api_command(
                        station,
                        "auth",
                        {"dj_user": Var("user"), "dj_password": Var("password")},
                        base_url=base_url,
                    ),
                ),
                _log("DJ auth response: #{ret}"),
                Line(Call("bool_of_string", Var("ret"))),
            ],
        ),
        Blank(),
        Assign(LIVE_FLAG, Call("ref", False)),
        Blank(),
        Def(
            "live_connected",
            ["header"],
            [
                _log("DJ source connected! #{header}"),
                Line(Raw(f"{LIVE_FLAG} := true")),
                Assign("ret", api_command(station, "djon", base_url=base_url)),
                _log("Live connected response: #{ret}"),
            ],
        ),
        Blank(),
        Def(
            "live_disconnected",
            [],
            [
                _log("DJ source disconnected!"),
                Line(Raw(f"{LIVE_FLAG} := false")),
                Assign("ret", api_command(station, "djoff", base_url=base_url)),
                _log("Live disconnected response: #{ret}"),
            ],
        ),
        Blank(),
    )

    harbor_input = Call(
        "input.harbor",
        mount,
        id=station.var_name("input_streamer"),
        port=get_harbor_port(station),
        user="shoutcast",
        auth=Var("dj_auth"),
        icy=True,
        max=HARBOR_MAX_SECONDS,
        buffer=float(dj_buffer),
        icy_metadata_charset=charset,
        metadata_charset=charset,
        on_connect=Var("live_connected"),
        on_disconnect=Var("live_disconnected"),
    )

    ctx.buffer.append(
        Comment("A Pre-DJ source of radio that can be broadcasted if needed"),
        Assign("radio_without_live", Var(RADIO)),
        Line(Call("ignore", Var("radio_without_live"))),
        Blank(),
        Comment("Live Broadcasting"),
        Assign(LIVE, Call("audio_to_stereo", harbor_input)),
        Line(Call("ignore", Call("output.dummy", Var(LIVE), fallible=True))),
        Assign(
            LIVE,
            Call(
                "fallback",
                ListOf([Var(LIVE), Call("blank", duration=SILENCE_PAD_SECONDS)]),
                id=station.var_name("live_fallback"),
                track_sensitive=False,
            ),
        ),
        Blank(),
        Assign(
            RADIO,
            Call(
                "switch",
                ListOf(
                    [
                        Pair(Thunk(Deref(Var(LIVE_FLAG)), compact=True), Var(LIVE)),
                        Pair(Thunk(Raw("true"), compact=True), Var(RADIO)),
                    ]
                ),
                id=station.var_name("live_switch"),
                track_sensitive=False,
            ),
        ),
    )
