"""
Configuration assembler.

Runs the section writers for one station in a fixed priority order
(highest first) over a single program buffer and persists the result to the
station's program path.

    header (30) -> playlists (25) -> harbor (20) -> custom (15)
        -> feedback (10) -> local outputs (5) -> remote outputs (0)
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import structlog
from sqlalchemy.orm import Session

from ..domain.entities import Station
from ..infra.exceptions import ConfigWriteFailure
from ..infra.settings import Settings, settings as default_settings
from ..runtime.control_client import ControlClient
from ..shared.files import atomic_write_text
from .builder import ProgramBuffer
from .context import WriteContext
from .custom import write_custom
from .feedback import write_feedback
from .harbor import write_harbor
from .header import write_header
from .manifest import ManifestWriter
from .outputs import write_local_outputs, write_remote_outputs
from .playlists import write_playlists

_log = structlog.get_logger(__name__)

SectionWriter = Callable[[WriteContext], None]

WRITERS: tuple[tuple[int, SectionWriter], ...] = (
    (30, write_header),
    (25, write_playlists),
    (20, write_harbor),
    (15, write_custom),
    (10, write_feedback),
    (5, write_local_outputs),
    (0, write_remote_outputs),
)


def ordered_writers() -> list[SectionWriter]:
    return [writer for _, writer in sorted(WRITERS, key=lambda entry: entry[0], reverse=True)]


class ConfigurationAssembler:
    """Builds and writes the engine program for a station."""

    def __init__(
        self,
        db: Session,
        *,
        control_client: ControlClient | None = None,
        manifests: ManifestWriter | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.db = db
        self.settings = settings or default_settings
        self.control_client = control_client or ControlClient(self.settings.resolved_control_host)
        self.manifests = manifests or ManifestWriter(self.control_client)

    def build(self, station: Station) -> str:
        """Run every section writer and return the program text.

        May create and flush a default playlist through ``db``; committing it
        is the caller's unit of work.
        """
        ctx = WriteContext(
            station=station,
            db=self.db,
            buffer=ProgramBuffer(),
            manifests=self.manifests,
            settings=self.settings,
        )
        for writer in ordered_writers():
            writer(ctx)
        return ctx.buffer.render()

    def write(self, station: Station) -> Path:
        """Build and persist the program.

        Any filesystem error, including manifest clearing and writing during
        the build, surfaces as ``ConfigWriteFailure``.
        """
        path = station.program_path
        try:
            atomic_write_text(path, self.build(station))
        except OSError as e:
            _log.error("program_write_failed", station_id=station.id, path=str(path), error=str(e))
            raise ConfigWriteFailure(f"Could not write program for station {station.id} to {path}: {e}") from e

        _log.info("program_written", station_id=station.id, station_name=station.name, path=str(path))
        return path
