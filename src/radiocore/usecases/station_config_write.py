from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from ..domain.entities import Station
from ..infra.exceptions import StationNotFound
from ..program.assembler import ConfigurationAssembler
from ..runtime.ports import describe_ports


def load_station(db: Session, station_id: int) -> Station:
    station = db.get(Station, station_id)
    if station is None:
        raise StationNotFound(f"Station {station_id} not found")
    return station


def write_station_config(
    db: Session,
    station_id: int,
    *,
    assembler: ConfigurationAssembler | None = None,
) -> dict[str, Any]:
    """Synthesize and persist the engine program for a station.

    A default playlist created during synthesis is committed together with
    the write.
    """
    station = load_station(db, station_id)
    assembler = assembler or ConfigurationAssembler(db)

    path = assembler.write(station)
    db.commit()

    return {
        "station_id": station.id,
        "station_name": station.name,
        "path": str(path),
        "ports": describe_ports(station),
    }


def station_ports(db: Session, station_id: int) -> dict[str, Any]:
    station = load_station(db, station_id)
    return {"station_id": station.id, "station_name": station.name, **describe_ports(station)}
