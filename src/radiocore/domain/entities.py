"""
Domain entities for RadioCore.

The entity repository that owns stations, playlists, media, mounts and
streamers is an external collaborator. These models describe the state
RadioCore reads from it; the only writes made through them are the
auto-created default playlist and streamer/live bookkeeping.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..infra.db import Base
from ..shared.types import (
    Annotations,
    FrontendType,
    OutputFormat,
    PlaylistOrder,
    PlaylistSource,
    PlaylistType,
    RemoteType,
    short_name,
)

PASSWORD_HASH_ITERATIONS = 260_000


def hash_password(password: str, *, salt: str | None = None) -> str:
    """Hash a streamer password as ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), PASSWORD_HASH_ITERATIONS
    )
    return f"pbkdf2_sha256${PASSWORD_HASH_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str | None) -> bool:
    if not encoded:
        return False
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), int(iterations)
    )
    return hmac.compare_digest(digest.hex(), expected)


class Station(Base):
    """One broadcast unit owning playlists, outputs and scheduling rules."""

    __tablename__ = "stations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    short_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    genre: Mapped[str | None] = mapped_column(String(255), nullable=True)
    url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    timezone: Mapped[str] = mapped_column(String(100), nullable=False, default="UTC")

    frontend_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=FrontendType.ICECAST.value
    )
    frontend_config: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    backend_config: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    enable_streamers: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_streamer_live: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    current_streamer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("station_streamers.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )
    disconnect_deactivate_streamer: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    adapter_api_key: Mapped[str | None] = mapped_column(String(100), nullable=True)
    radio_base_dir: Mapped[str] = mapped_column(String(255), nullable=False)

    playlists: Mapped[list[StationPlaylist]] = relationship(
        back_populates="station", order_by="StationPlaylist.id", cascade="all, delete-orphan"
    )
    mounts: Mapped[list[StationMount]] = relationship(
        back_populates="station", order_by="StationMount.id", cascade="all, delete-orphan"
    )
    remotes: Mapped[list[StationRemote]] = relationship(
        back_populates="station", order_by="StationRemote.id", cascade="all, delete-orphan"
    )
    streamers: Mapped[list[StationStreamer]] = relationship(
        back_populates="station",
        foreign_keys="StationStreamer.station_id",
        cascade="all, delete-orphan",
    )
    current_streamer: Mapped[StationStreamer | None] = relationship(
        foreign_keys=[current_streamer_id], post_update=True
    )

    @property
    def frontend_settings(self) -> dict[str, Any]:
        return dict(self.frontend_config or {})

    @property
    def backend_settings(self) -> dict[str, Any]:
        return dict(self.backend_config or {})

    @property
    def radio_config_dir(self) -> Path:
        return Path(self.radio_base_dir) / "config"

    @property
    def radio_playlists_dir(self) -> Path:
        return Path(self.radio_base_dir) / "playlists"

    @property
    def radio_media_dir(self) -> Path:
        return Path(self.radio_base_dir) / "media"

    @property
    def program_path(self) -> Path:
        """Where the generated engine program is written."""
        return self.radio_config_dir / "liquidsoap.liq"

    def var_name(self, name: str) -> str:
        """Station-prefixed engine identifier (``requests`` -> ``my_station_requests``)."""
        prefix = short_name(self.short_name)
        if prefix:
            return f"{prefix}_{name}"
        return f"station_{self.id}_{name}"

    def __repr__(self) -> str:
        return f"<Station(id={self.id}, name={self.name})>"


class StationPlaylist(Base):
    """Ordered/weighted track collection or remote-stream reference."""

    __tablename__ = "station_playlists"

    DEFAULT_WEIGHT = 3
    DEFAULT_REMOTE_BUFFER = 5

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    type: Mapped[str] = mapped_column(String(50), nullable=False, default=PlaylistType.DEFAULT.value)
    source: Mapped[str] = mapped_column(
        String(50), nullable=False, default=PlaylistSource.SONGS.value
    )
    order: Mapped[str] = mapped_column(
        "playback_order", String(50), nullable=False, default=PlaylistOrder.SHUFFLE.value
    )

    remote_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    remote_type: Mapped[str | None] = mapped_column(
        String(25), nullable=True, default=RemoteType.STREAM.value
    )
    remote_buffer: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_jingle: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_WEIGHT)

    play_per_songs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    play_per_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    play_per_hour_minute: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Time-of-day codes as HHMM integers (e.g. 2330)
    schedule_start_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    schedule_end_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # ISO weekdays, 1 = Monday .. 7 = Sunday
    schedule_days: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)

    interrupt_other_songs: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    loop_playlist_once: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    merge_playlist: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    play_single_track: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    station: Mapped[Station] = relationship(back_populates="playlists")
    media_items: Mapped[list[StationPlaylistMedia]] = relationship(
        back_populates="playlist",
        order_by="StationPlaylistMedia.weight",
        cascade="all, delete-orphan",
    )

    @property
    def short_name(self) -> str:
        return short_name(self.name)

    @property
    def var_name(self) -> str:
        """Pipeline variable holding this playlist's source in the generated program."""
        return f"playlist_{self.short_name}"

    def __repr__(self) -> str:
        return f"<StationPlaylist(id={self.id}, name={self.name}, type={self.type})>"


class StationMedia(Base):
    """A single audio file in a station's media library."""

    __tablename__ = "station_media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    path: Mapped[str] = mapped_column(String(500), nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    artist: Mapped[str | None] = mapped_column(String(200), nullable=True)
    album: Mapped[str | None] = mapped_column(String(200), nullable=True)
    song_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    amplify: Mapped[float | None] = mapped_column(Float, nullable=True)
    fade_in: Mapped[float | None] = mapped_column(Float, nullable=True)
    fade_out: Mapped[float | None] = mapped_column(Float, nullable=True)
    cue_in: Mapped[float | None] = mapped_column(Float, nullable=True)
    cue_out: Mapped[float | None] = mapped_column(Float, nullable=True)

    def annotations(self) -> Annotations:
        """Tag map attached to this track in playlist manifests."""
        annotations: Annotations = {}
        for key in ("title", "artist", "album", "song_id"):
            value = getattr(self, key)
            if value:
                annotations[key] = str(value)
        annotations["media_id"] = str(self.id)

        for key in ("fade_in", "fade_out", "cue_in", "cue_out"):
            value = getattr(self, key)
            if value is not None:
                annotations[f"liq_{key}"] = f"{float(value):g}"
        if self.amplify is not None:
            annotations["liq_amplify"] = f"{float(self.amplify):g}dB"
        return annotations

    def __repr__(self) -> str:
        return f"<StationMedia(id={self.id}, path={self.path})>"


class StationPlaylistMedia(Base):
    """Ordered association of media to a playlist."""

    __tablename__ = "station_playlist_media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    playlist_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("station_playlists.id", ondelete="CASCADE"), nullable=False
    )
    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("station_media.id", ondelete="CASCADE"), nullable=False
    )
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    playlist: Mapped[StationPlaylist] = relationship(back_populates="media_items")
    media: Mapped[StationMedia] = relationship()


class _OutputTargetColumns:
    """Columns shared by local mounts and remote relays."""

    enable_autodj: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    autodj_format: Mapped[str | None] = mapped_column(
        String(10), nullable=True, default=OutputFormat.MP3.value
    )
    autodj_bitrate: Mapped[int | None] = mapped_column(Integer, nullable=True, default=128)
    autodj_host: Mapped[str | None] = mapped_column(String(255), nullable=True)
    autodj_port: Mapped[int | None] = mapped_column(Integer, nullable=True)
    autodj_username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    autodj_password: Mapped[str | None] = mapped_column(String(100), nullable=True)
    autodj_mount: Mapped[str | None] = mapped_column(String(150), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    autodj_shoutcast_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class StationMount(_OutputTargetColumns, Base):
    """Mount point on the station's own frontend."""

    __tablename__ = "station_mounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    station: Mapped[Station] = relationship(back_populates="mounts")

    def __repr__(self) -> str:
        return f"<StationMount(id={self.id}, name={self.name})>"


class StationRemote(_OutputTargetColumns, Base):
    """Relay to a remote streaming server."""

    __tablename__ = "station_remotes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )

    station: Mapped[Station] = relationship(back_populates="remotes")

    def __repr__(self) -> str:
        return f"<StationRemote(id={self.id}, host={self.autodj_host})>"


class StationStreamer(Base):
    """Live DJ account allowed to connect to the harbor."""

    __tablename__ = "station_streamers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False
    )
    streamer_username: Mapped[str] = mapped_column(String(50), nullable=False)
    streamer_password: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=sa.true())
    reactivate_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    station: Mapped[Station] = relationship(back_populates="streamers", foreign_keys=[station_id])

    def set_password(self, password: str) -> None:
        self.streamer_password = hash_password(password)

    def deactivate_for(self, seconds: int, *, now: datetime | None = None) -> None:
        """Block this streamer from reconnecting for ``seconds``."""
        now = now or datetime.now(timezone.utc)
        self.reactivate_at = now + timedelta(seconds=seconds)

    def is_deactivated(self, *, now: datetime | None = None) -> bool:
        if self.reactivate_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        reactivate_at = self.reactivate_at
        # SQLite drops tzinfo on round-trip
        if reactivate_at.tzinfo is None:
            reactivate_at = reactivate_at.replace(tzinfo=timezone.utc)
        return reactivate_at > now

    def __repr__(self) -> str:
        return f"<StationStreamer(id={self.id}, username={self.streamer_username})>"
