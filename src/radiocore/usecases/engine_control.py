"""Runtime commands against a station's running engine, addressed by station id."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from ..domain.entities import StationPlaylist
from ..runtime.control_client import ControlClient
from .station_config_write import load_station


def _result(station_id: int, command: str, lines: list[str]) -> dict[str, Any]:
    return {"station_id": station_id, "command": command, "response": lines}


def send_command(db: Session, station_id: int, command: str, *, client: ControlClient | None = None) -> dict[str, Any]:
    station = load_station(db, station_id)
    lines = (client or ControlClient()).command(station, command)
    return _result(station.id, command, lines)


def skip_track(db: Session, station_id: int, *, client: ControlClient | None = None) -> dict[str, Any]:
    station = load_station(db, station_id)
    return _result(station.id, "skip", (client or ControlClient()).skip(station))


def show_queue(db: Session, station_id: int, *, client: ControlClient | None = None) -> dict[str, Any]:
    station = load_station(db, station_id)
    return _result(station.id, "queue", (client or ControlClient()).queue(station))


def request_track(
    db: Session, station_id: int, music_file: str, *, client: ControlClient | None = None
) -> dict[str, Any]:
    station = load_station(db, station_id)
    return _result(station.id, "request", (client or ControlClient()).request(station, music_file))


def disconnect_streamer(db: Session, station_id: int, *, client: ControlClient | None = None) -> dict[str, Any]:
    station = load_station(db, station_id)
    lines = (client or ControlClient()).disconnect_streamer(db, station)
    db.commit()
    return _result(station.id, "disconnect", lines)


def reload_playlist(
    db: Session, station_id: int, playlist_id: int, *, client: ControlClient | None = None
) -> dict[str, Any]:
    station = load_station(db, station_id)
    playlist = db.get(StationPlaylist, playlist_id)
    if playlist is None or playlist.station_id != station.id:
        raise ValueError(f"Playlist {playlist_id} does not belong to station {station_id}")
    return _result(station.id, "reload", (client or ControlClient()).reload_playlist(station, playlist))
