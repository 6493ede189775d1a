"""
Track manifest writer.

Each local-song playlist gets a manifest file in the station's playlists
directory that the engine reads to build the playlist. One record per line:

    annotate:key1="value1",key2="value2":/absolute/path/to/track.mp3

Values have quotes and CR/LF sanitized; they are not otherwise escaped.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

import structlog

from ..domain.entities import StationPlaylist
from ..infra.exceptions import ConnectionFailure, ManifestReloadFailure
from ..runtime.control_client import ControlClient
from ..shared.files import atomic_write_text
from .builder import clean_up_string

_log = structlog.get_logger(__name__)

RECORD_PREFIX = "annotate:"
MANIFEST_SUFFIX = ".m3u"

_RECORD_RE = re.compile(r'^annotate:((?:[^=,":]+="[^"]*")(?:,[^=,":]+="[^"]*")*)?:(.*)$')
_PAIR_RE = re.compile(r'([^=,":]+)="([^"]*)"')


def format_record(path: str | Path, annotations: Mapping[str, object]) -> str:
    pairs = ",".join(
        f'{clean_up_string(key)}="{clean_up_string(value)}"' for key, value in annotations.items()
    )
    clean_path = str(path).replace("\r", "").replace("\n", "")
    return f"{RECORD_PREFIX}{pairs}:{clean_path}"


def parse_record(line: str) -> tuple[str, dict[str, str]]:
    """Split one manifest record into ``(path, annotations)``."""
    match = _RECORD_RE.match(line)
    if not match:
        raise ValueError(f"Not a manifest record: {line!r}")
    pairs, path = match.groups()
    annotations = {key: value for key, value in _PAIR_RE.findall(pairs or "")}
    return path, annotations


def parse_manifest(text: str) -> list[tuple[str, dict[str, str]]]:
    return [parse_record(line) for line in text.splitlines() if line.strip()]


def manifest_path(playlist: StationPlaylist) -> Path:
    return playlist.station.radio_playlists_dir / f"{playlist.var_name}{MANIFEST_SUFFIX}"


def playlist_records(playlist: StationPlaylist) -> list[str]:
    """Manifest records for a playlist's enabled tracks, in playlist order."""
    media_dir = playlist.station.radio_media_dir
    records: list[str] = []
    for item in sorted(playlist.media_items, key=lambda entry: entry.weight or 0):
        media = item.media
        if media is None or not media.is_enabled:
            continue

        annotations = media.annotations()
        if playlist.is_jingle:
            annotations["is_jingle_mode"] = "true"
            annotations.pop("media_id", None)
        else:
            annotations["playlist_id"] = str(playlist.id)

        records.append(format_record(media_dir / media.path, annotations))
    return records


class ManifestWriter:
    """Writes playlist manifests and optionally asks the engine to reload them."""

    def __init__(self, control_client: ControlClient | None = None) -> None:
        self.control_client = control_client or ControlClient()

    def clear(self, playlists_dir: Path) -> int:
        """Remove every prior manifest from ``playlists_dir``; returns the count removed."""
        playlists_dir.mkdir(parents=True, exist_ok=True)
        removed = 0
        for entry in playlists_dir.iterdir():
            if entry.is_file():
                entry.unlink(missing_ok=True)
                removed += 1
        return removed

    def write(self, playlist: StationPlaylist, *, notify: bool = True) -> Path | None:
        """Write the manifest for ``playlist``.

        Returns the manifest path, or ``None`` when the playlist has no enabled
        tracks (no file is written and callers must not reference one).
        A failed hot reload is logged and never propagated.
        """
        records = playlist_records(playlist)
        if not records:
            _log.info("manifest_skipped_empty", playlist=playlist.var_name, station_id=playlist.station_id)
            return None

        path = atomic_write_text(manifest_path(playlist), "\n".join(records))
        _log.debug("manifest_written", playlist=playlist.var_name, path=str(path), tracks=len(records))

        if notify:
            try:
                self.reload(playlist)
            except ManifestReloadFailure as e:
                _log.error(
                    "manifest_reload_failed",
                    playlist=playlist.var_name,
                    station_id=playlist.station_id,
                    message=str(e),
                )
        return path

    def reload(self, playlist: StationPlaylist) -> list[str]:
        try:
            return self.control_client.reload_playlist(playlist.station, playlist)
        except ConnectionFailure as e:
            raise ManifestReloadFailure(f"Could not reload {playlist.var_name}: {e}") from e
