"""Now-playing feedback: report every track change that carries a song id."""

from __future__ import annotations

from .builder import Assign, Blank, Call, Comment, Def, If, Line, Raw, Var
from .callbacks import api_command
from .context import RADIO, WriteContext


def _tag(key: str) -> Raw:
    return Raw(f'm["{key}"]')


def write_feedback(ctx: WriteContext) -> None:
    station = ctx.station

    report = api_command(
        station,
        "feedback",
        {"song": _tag("song_id"), "media": _tag("media_id"), "playlist": _tag("playlist_id")},
        base_url=ctx.settings.internal_api_url,
    )

    ctx.buffer.append(
        Comment("Send metadata changes back to the station API"),
        Def(
            "metadata_updated",
            ["m"],
            [
                If(
                    'm["song_id"] != ""',
                    [
                        Assign("ret", report),
                        Line(Call("log", Raw('"Feedback response: #{ret}"'))),
                    ],
                )
            ],
        ),
        Blank(),
        Assign(RADIO, Call("on_metadata", Var("metadata_updated"), Var(RADIO))),
    )
