"""Tests for station program and engine control use cases."""

from unittest.mock import MagicMock

import pytest

from radiocore.infra.exceptions import StationNotFound
from radiocore.program.assembler import ConfigurationAssembler
from radiocore.usecases import engine_control, station_config_write


class TestWriteStationConfig:
    def test_writes_program_and_commits_default_playlist(self, db, station, control_client, test_settings):
        assembler = ConfigurationAssembler(db, control_client=control_client, settings=test_settings)

        result = station_config_write.write_station_config(db, station.id, assembler=assembler)

        assert result["path"] == str(station.program_path)
        assert result["ports"] == {"public": 8000, "harbor": 8005, "control": 8004}
        assert station.program_path.exists()
        assert [p.name for p in station.playlists] == ["default"]
        assert not db.new and not db.dirty

    def test_unknown_station(self, db):
        with pytest.raises(StationNotFound):
            station_config_write.write_station_config(db, 999)

    def test_station_ports(self, db, station):
        assert station_config_write.station_ports(db, station.id) == {
            "station_id": station.id,
            "station_name": "Test Radio",
            "public": 8000,
            "harbor": 8005,
            "control": 8004,
        }


class TestEngineControl:
    def test_send_command_uses_client(self, db, station):
        client = MagicMock()
        client.command.return_value = ["OK"]

        result = engine_control.send_command(db, station.id, "help", client=client)

        client.command.assert_called_once_with(station, "help")
        assert result == {"station_id": station.id, "command": "help", "response": ["OK"]}

    def test_request_track(self, db, station):
        client = MagicMock()
        client.request.return_value = ["7"]

        result = engine_control.request_track(db, station.id, "/media/a.mp3", client=client)

        client.request.assert_called_once_with(station, "/media/a.mp3")
        assert result["response"] == ["7"]

    def test_reload_playlist_checks_ownership(self, db, station, factory):
        playlist = factory.playlist("Rock")
        client = MagicMock()
        client.reload_playlist.return_value = ["OK"]

        engine_control.reload_playlist(db, station.id, playlist.id, client=client)
        client.reload_playlist.assert_called_once_with(station, playlist)

        with pytest.raises(ValueError):
            engine_control.reload_playlist(db, station.id, 12345, client=client)

    def test_unknown_station(self, db):
        with pytest.raises(StationNotFound):
            engine_control.skip_track(db, 42, client=MagicMock())
