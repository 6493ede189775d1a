"""
Port derivation for a station's frontend, live harbor and control port.

Ports are derived from the station's ordinal id unless the station's
frontend/backend configuration pins them:

- public (frontend) port: ``8000 + (id - 1) * 10``
- harbor port (live DJ input): public port + 5
- control port: harbor port - 1

The external process supervisor must expose the same ports.
"""

from __future__ import annotations

from ..domain.entities import Station

BASE_PUBLIC_PORT = 8000
PORTS_PER_STATION = 10
HARBOR_PORT_OFFSET = 5


def get_public_port(station: Station) -> int:
    configured = station.frontend_settings.get("port")
    if configured:
        return int(configured)
    return BASE_PUBLIC_PORT + (int(station.id) - 1) * PORTS_PER_STATION


def get_harbor_port(station: Station) -> int:
    configured = station.backend_settings.get("dj_port")
    if configured:
        return int(configured)
    return get_public_port(station) + HARBOR_PORT_OFFSET


def get_control_port(station: Station) -> int:
    configured = station.backend_settings.get("telnet_port")
    if configured:
        return int(configured)
    return get_harbor_port(station) - 1


def describe_ports(station: Station) -> dict[str, int]:
    return {
        "public": get_public_port(station),
        "harbor": get_harbor_port(station),
        "control": get_control_port(station),
    }
