"""Tests for per-station port derivation."""

from types import SimpleNamespace

import pytest

from radiocore.runtime.ports import describe_ports, get_control_port, get_harbor_port, get_public_port


def make_station(station_id, frontend=None, backend=None):
    return SimpleNamespace(id=station_id, frontend_settings=frontend or {}, backend_settings=backend or {})


class TestPorts:
    @pytest.mark.parametrize(
        "station_id, public, harbor, control",
        [(1, 8000, 8005, 8004), (2, 8010, 8015, 8014), (10, 8090, 8095, 8094)],
    )
    def test_derived_from_station_id(self, station_id, public, harbor, control):
        station = make_station(station_id)
        assert describe_ports(station) == {"public": public, "harbor": harbor, "control": control}

    def test_frontend_port_shifts_harbor_and_control(self):
        station = make_station(3, frontend={"port": 9000})
        assert get_public_port(station) == 9000
        assert get_harbor_port(station) == 9005
        assert get_control_port(station) == 9004

    def test_backend_overrides(self):
        station = make_station(1, backend={"dj_port": 7000, "telnet_port": 7100})
        assert get_harbor_port(station) == 7000
        assert get_control_port(station) == 7100

    def test_dj_port_moves_control_port(self):
        station = make_station(1, backend={"dj_port": 7000})
        assert get_control_port(station) == 6999
