"""
Control protocol client for a running audio engine.

The engine serves a plain-text, line-oriented control port. Each call opens
its own TCP connection, writes one command line followed by ``quit``, and
collects the response lines until the engine closes the connection.

Concurrent calls use independent sockets and are not ordered relative to
each other; the engine decides how to interleave them.
"""

from __future__ import annotations

import socket
from collections.abc import Callable
from urllib.parse import unquote_plus

import structlog
from sqlalchemy.orm import Session

from ..domain.entities import Station, StationPlaylist
from ..infra.exceptions import ConnectionFailure, QueueConflict
from ..infra.settings import settings
from .ports import get_control_port

_log = structlog.get_logger(__name__)

CONTROL_TIMEOUT_SECONDS = 20.0
SESSION_TERMINATOR = "quit"

Connector = Callable[..., socket.socket]


def prepare_command(command: str) -> str:
    """Decode a caller-supplied command into a single safe protocol line.

    The command is URL-decoded, the ``\\'`` and ``&amp;`` markers are restored
    to ``'`` and ``&``, and CR/LF are dropped so one request can never smuggle
    a second command onto the wire.
    """
    decoded = unquote_plus(command)
    decoded = decoded.replace("\\'", "'").replace("&amp;", "&")
    return decoded.replace("\r", "").replace("\n", "")


class ControlClient:
    """Issues runtime commands to a station's engine over its control port."""

    def __init__(
        self,
        host: str | None = None,
        *,
        timeout: float = CONTROL_TIMEOUT_SECONDS,
        connector: Connector = socket.create_connection,
    ) -> None:
        self.host = host
        self.timeout = timeout
        self._connect = connector

    def address(self, station: Station) -> tuple[str, int]:
        return (self.host or settings.resolved_control_host, get_control_port(station))

    def command(self, station: Station, command_str: str) -> list[str]:
        """Send one command and return the trimmed response lines in order.

        Raises:
            ConnectionFailure: the control port could not be reached within the
                timeout, or the connection broke while reading.
        """
        host, port = self.address(station)
        line = prepare_command(command_str)

        try:
            sock = self._connect((host, port), timeout=self.timeout)
        except OSError as e:
            _log.warning("control_connect_failed", station_id=station.id, host=host, port=port, error=str(e))
            raise ConnectionFailure(f"Control connection to {host}:{port} failed: {e}") from e

        _log.debug("control_command_sent", station_id=station.id, command=line)
        with sock:
            try:
                sock.sendall(f"{line}\n{SESSION_TERMINATOR}\n".encode("utf-8"))
                with sock.makefile("r", encoding="utf-8", errors="replace", newline="\n") as reader:
                    return [response.strip() for response in reader]
            except OSError as e:
                raise ConnectionFailure(f"Control session with {host}:{port} failed: {e}") from e

    # ------------------------------------------------------------------
    # Derived operations
    # ------------------------------------------------------------------

    def skip(self, station: Station) -> list[str]:
        """Skip the currently playing track."""
        return self.command(station, f"{station.var_name('radio_cue')}.skip")

    def queue(self, station: Station) -> list[str]:
        """Peek at the manual request queue."""
        return self.command(station, f"{station.var_name('requests')}.queue")

    def request(self, station: Station, music_file: str) -> list[str]:
        """Enqueue a manual request.

        The pending-queue check and the push are two separate round trips, so
        two callers racing each other can both succeed.

        Raises:
            QueueConflict: a request is still pending.
        """
        pending = self.queue(station)
        if pending and pending[0]:
            raise QueueConflict("Song(s) still pending in request queue.")
        return self.command(station, f"{station.var_name('requests')}.push {music_file}")

    def reload_playlist(self, station: Station, playlist: StationPlaylist) -> list[str]:
        """Ask the engine to re-read a playlist's manifest."""
        return self.command(station, f"{playlist.var_name}.reload")

    def disconnect_streamer(self, db: Session, station: Station) -> list[str]:
        """Kick the live streamer, blocking reconnects if the station asks for it."""
        streamer = station.current_streamer
        timeout = int(station.disconnect_deactivate_streamer or 0)

        if streamer is not None and timeout > 0:
            streamer.deactivate_for(timeout)
            db.add(streamer)
            db.flush()
            _log.info(
                "streamer_deactivated",
                station_id=station.id,
                streamer=streamer.streamer_username,
                seconds=timeout,
            )

        return self.command(station, f"{station.var_name('input_streamer')}.stop")
