"""Shared state handed to every section writer during one synthesis pass."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from ..domain.entities import Station
from ..infra.settings import Settings
from .builder import ProgramBuffer
from .manifest import ManifestWriter

# Pipeline variables every section after scheduling may read.
RADIO = "radio"


@dataclass
class WriteContext:
    station: Station
    db: Session
    buffer: ProgramBuffer
    manifests: ManifestWriter
    settings: Settings
