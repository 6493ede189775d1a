"""
Global test configuration for RadioCore.

Database-backed tests run against a fresh in-memory SQLite database per test.
Station fixtures keep their directories under pytest's ``tmp_path``.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from radiocore.domain.entities import (
    Station,
    StationMedia,
    StationMount,
    StationPlaylist,
    StationPlaylistMedia,
    StationRemote,
)
from radiocore.infra.db import Base
from radiocore.infra.exceptions import ConnectionFailure
from radiocore.infra.settings import Settings
from radiocore.program.builder import ProgramBuffer
from radiocore.program.context import WriteContext
from radiocore.program.manifest import ManifestWriter


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestSession = sessionmaker(bind=engine, autoflush=False, future=True, expire_on_commit=False)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite://",
        internal_api_url="http://web",
        error_track_path="/usr/local/share/error.mp3",
        engine_binary="/usr/local/bin/liquidsoap",
        inside_docker=False,
        control_host=None,
    )


@pytest.fixture
def station(db, tmp_path):
    station = Station(
        name="Test Radio",
        short_name="test_radio",
        description="All tests, all day",
        genre="Various",
        url="https://radio.example.com",
        timezone="America/Chicago",
        frontend_config={"source_pw": "hackme"},
        backend_config={},
        adapter_api_key="key123",
        radio_base_dir=str(tmp_path / "station"),
    )
    db.add(station)
    db.flush()
    return station


class RecordingControlClient:
    """Control client double that records commands instead of opening sockets."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.reloaded: list[str] = []

    def reload_playlist(self, station, playlist):
        if self.fail:
            raise ConnectionFailure("Control connection to localhost:8004 failed: refused")
        self.reloaded.append(playlist.var_name)
        return ["OK"]


@pytest.fixture
def control_client():
    return RecordingControlClient()


@pytest.fixture
def failing_control_client():
    return RecordingControlClient(fail=True)


def add_playlist(db, station, name, **fields):
    playlist = StationPlaylist(station=station, name=name, **fields)
    db.add(playlist)
    db.flush()
    return playlist


def add_track(db, station, playlist, path, *, weight=0, **fields):
    media = StationMedia(station_id=station.id, path=path, **fields)
    db.add(media)
    db.flush()
    item = StationPlaylistMedia(playlist=playlist, media=media, weight=weight)
    db.add(item)
    db.flush()
    return media


def add_mount(db, station, name, **fields):
    mount = StationMount(station=station, name=name, **fields)
    db.add(mount)
    db.flush()
    return mount


def add_remote(db, station, **fields):
    remote = StationRemote(station=station, **fields)
    db.add(remote)
    db.flush()
    return remote


@pytest.fixture
def factory(db, station):
    """Helpers for populating the test station."""

    class _Factory:
        @staticmethod
        def playlist(name, **fields):
            return add_playlist(db, station, name, **fields)

        @staticmethod
        def track(playlist, path, **fields):
            return add_track(db, station, playlist, path, **fields)

        @staticmethod
        def mount(name, **fields):
            return add_mount(db, station, name, **fields)

        @staticmethod
        def remote(**fields):
            return add_remote(db, station, **fields)

    return _Factory()


@pytest.fixture
def make_context(db, station, control_client, test_settings):
    """Build a WriteContext for the test station; ``known`` seeds already-assigned variables."""

    def _make(known=()):
        return WriteContext(
            station=station,
            db=db,
            buffer=ProgramBuffer(known=known),
            manifests=ManifestWriter(control_client),
            settings=test_settings,
        )

    return _make
