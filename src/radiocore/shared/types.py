"""
Shared types and enums for RadioCore.

This module contains common types and enums that are used across
the domain, program synthesis, runtime and CLI layers.
"""

from __future__ import annotations

import re
from enum import Enum


class PlaylistOrder(str, Enum):
    """Order in which a playlist's tracks are played."""

    SEQUENTIAL = "sequential"
    SHUFFLE = "shuffle"
    RANDOM = "random"


class PlaylistType(str, Enum):
    """Mixing behavior of a playlist within the station's rotation."""

    DEFAULT = "default"
    ONCE_PER_X_SONGS = "once_per_x_songs"
    ONCE_PER_X_MINUTES = "once_per_x_minutes"
    ONCE_PER_HOUR = "once_per_hour"
    SCHEDULED = "scheduled"
    ADVANCED = "custom"


class PlaylistSource(str, Enum):
    """Where a playlist's audio comes from."""

    SONGS = "songs"
    REMOTE_URL = "remote_url"


class RemoteType(str, Enum):
    """Kind of remote URL a playlist points at."""

    STREAM = "stream"
    PLAYLIST = "playlist"


class OutputFormat(str, Enum):
    """Encoded formats supported by mounts and relays."""

    MP3 = "mp3"
    AAC = "aac"
    OGG = "ogg"
    OPUS = "opus"


class FrontendType(str, Enum):
    """Public streaming frontend in front of the audio engine."""

    ICECAST = "icecast"
    SHOUTCAST = "shoutcast"
    REMOTE = "remote"


class CrossfadeType(str, Enum):
    """Crossfade algorithms applied between tracks."""

    NORMAL = "normal"
    SMART = "smart"
    DISABLED = "disabled"

    @classmethod
    def _missing_(cls, value: object) -> CrossfadeType | None:
        if isinstance(value, str) and value.lower() in ("none", "disabled", ""):
            return cls.DISABLED
        return None


def short_name(name: str | None) -> str:
    """Lower-case slug usable as an engine identifier (``Morning Show`` -> ``morning_show``)."""
    if not name:
        return ""
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


# Type aliases for common data structures
Annotations = dict[str, str]
