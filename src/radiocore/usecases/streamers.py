"""
Live streamer bookkeeping called back by the engine.

The harbor's auth callback ends up in ``authenticate_streamer``; the
connect/disconnect callbacks end up in ``toggle_live_status``.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..domain.entities import Station, StationStreamer, verify_password
from ..infra.settings import Settings, settings as default_settings
from ..runtime.ports import get_harbor_port

_log = structlog.get_logger(__name__)

AUTH_OK = "true"
AUTH_DENIED = "false"

UNAVAILABLE_ENGINE_COMMAND = "/bin/false"


def split_credentials(user: str, password: str) -> tuple[str, str]:
    """Support clients that can only send a password by joining ``user,pass`` or ``user:pass``."""
    for separator in (",", ":"):
        if separator in password:
            parts = password.split(separator)
            user, password = parts[0], parts[1]
    return user, password


def find_streamer(db: Session, station: Station, username: str) -> StationStreamer | None:
    stmt = select(StationStreamer).where(
        StationStreamer.station_id == station.id,
        StationStreamer.streamer_username == username,
    )
    return db.execute(stmt).scalars().first()


def authenticate_streamer(db: Session, station: Station, user: str, password: str) -> str:
    """Answer the harbor auth callback with ``"true"`` or ``"false"``."""
    source_pw = station.frontend_settings.get("source_pw")
    if source_pw and source_pw == password:
        return AUTH_OK

    user, password = split_credentials(user, password)

    streamer = find_streamer(db, station, user)
    if (
        streamer is None
        or not streamer.is_active
        or streamer.is_deactivated()
        or not verify_password(password, streamer.streamer_password)
    ):
        _log.info("streamer_auth_denied", station_id=station.id, username=user)
        return AUTH_DENIED

    station.current_streamer = streamer
    db.add(station)
    db.flush()
    _log.debug("streamer_authenticated", station_id=station.id, username=user)
    return AUTH_OK


def toggle_live_status(db: Session, station: Station, is_live: bool = True) -> None:
    station.is_streamer_live = is_live
    db.add(station)
    db.flush()
    _log.info("streamer_live_status", station_id=station.id, is_live=is_live)


def get_web_streaming_url(station: Station, base_url: str) -> str:
    """WebSocket URL browsers use to broadcast into the station's harbor."""
    parts = urlsplit(base_url)
    path = f"{parts.path.rstrip('/')}/radio/{get_harbor_port(station)}/"
    return urlunsplit(("wss", parts.netloc, path, parts.query, parts.fragment))


def get_engine_command(station: Station, settings: Settings | None = None) -> str:
    binary = (settings or default_settings).engine_binary
    if not binary:
        return UNAVAILABLE_ENGINE_COMMAND
    return f"{binary} {station.program_path}"
