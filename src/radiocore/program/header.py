"""Header section: warning banner and engine daemon/runtime settings."""

from __future__ import annotations

from ..runtime.ports import get_control_port
from .builder import Blank, Comment, ListOf, SetEnv, Setting
from .context import WriteContext

WARNING_LINES = (
    "WARNING! This file is automatically generated by RadioCore.",
    "Do not update it directly!",
)


def write_header(ctx: WriteContext) -> None:
    station = ctx.station
    buffer = ctx.buffer

    buffer.prepend(*(Comment(text) for text in WARNING_LINES))

    buffer.append(
        Comment("Daemon Settings"),
        Setting("init.daemon", False),
        Setting("init.daemon.pidfile.path", f"{station.radio_config_dir}/liquidsoap.pid"),
        Setting("log.stdout", True),
        Setting("log.file", False),
        Setting("server.telnet", True),
        Setting("server.telnet.bind_addr", ctx.settings.control_bind_addr),
        Setting("server.telnet.port", get_control_port(station)),
        Setting("harbor.bind_addrs", ListOf(["0.0.0.0"])),
        Blank(),
        Setting("tag.encodings", ListOf(["UTF-8", "ISO-8859-1"])),
        Setting("encoder.encoder.export", ListOf(["artist", "title", "album", "song"])),
        Blank(),
        SetEnv("TZ", station.timezone or "UTC"),
        Blank(),
    )
