"""CLI tests for the station and engine command groups."""

import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from radiocore.cli.main import app, router
from radiocore.infra.exceptions import ConnectionFailure, QueueConflict, StationNotFound


def _mock_write_result():
    return {
        "station_id": 1,
        "station_name": "Test Radio",
        "path": "/var/radio/test/config/liquidsoap.liq",
        "ports": {"public": 8000, "harbor": 8005, "control": 8004},
    }


class TestRouter:
    def test_groups_registered(self):
        assert router.list_registered_groups() == ["station", "engine"]

    def test_group_help_recorded(self):
        groups = router.get_registered_groups()
        assert set(groups) == {"station", "engine"}
        assert all(entry["help"] for entry in groups.values())


class TestStationCommands:
    def setup_method(self):
        self.runner = CliRunner()

    def test_write_config_human(self):
        with patch("radiocore.cli.commands.station.session") as mock_session, patch(
            "radiocore.usecases.station_config_write.write_station_config"
        ) as mock_uc:
            mock_session.return_value.__enter__.return_value = MagicMock()
            mock_uc.return_value = _mock_write_result()

            result = self.runner.invoke(app, ["station", "write-config", "1"])

            assert result.exit_code == 0
            assert "Program written:" in result.stdout
            assert "/var/radio/test/config/liquidsoap.liq" in result.stdout
            assert mock_uc.call_args.args[1] == 1

    def test_write_config_json(self):
        with patch("radiocore.cli.commands.station.session") as mock_session, patch(
            "radiocore.usecases.station_config_write.write_station_config"
        ) as mock_uc:
            mock_session.return_value.__enter__.return_value = MagicMock()
            mock_uc.return_value = _mock_write_result()

            result = self.runner.invoke(app, ["station", "write-config", "1", "--json"])

            assert result.exit_code == 0
            payload = json.loads(result.stdout)
            assert payload["status"] == "ok"
            assert payload["program"]["ports"]["control"] == 8004

    def test_write_config_unknown_station(self):
        with patch("radiocore.cli.commands.station.session") as mock_session, patch(
            "radiocore.usecases.station_config_write.write_station_config",
            side_effect=StationNotFound("Station 9 not found"),
        ):
            mock_session.return_value.__enter__.return_value = MagicMock()

            result = self.runner.invoke(app, ["station", "write-config", "9"])

            assert result.exit_code == 1
            assert "Error: Station 9 not found" in result.output

    def test_ports_json(self):
        with patch("radiocore.cli.commands.station.session") as mock_session, patch(
            "radiocore.usecases.station_config_write.station_ports"
        ) as mock_uc:
            mock_session.return_value.__enter__.return_value = MagicMock()
            mock_uc.return_value = {"station_id": 2, "station_name": "Two", "public": 8010, "harbor": 8015, "control": 8014}

            result = self.runner.invoke(app, ["station", "ports", "2", "--json"])

            assert result.exit_code == 0
            assert json.loads(result.stdout) == {
                "status": "ok",
                "ports": {"station_id": 2, "station_name": "Two", "public": 8010, "harbor": 8015, "control": 8014},
            }


class TestEngineCommands:
    def setup_method(self):
        self.runner = CliRunner()

    def test_skip_prints_response_lines(self):
        with patch("radiocore.cli.commands.engine.session") as mock_session, patch(
            "radiocore.usecases.engine_control.skip_track"
        ) as mock_uc:
            mock_session.return_value.__enter__.return_value = MagicMock()
            mock_uc.return_value = {"station_id": 1, "command": "skip", "response": ["Done", "END"]}

            result = self.runner.invoke(app, ["engine", "skip", "1"])

            assert result.exit_code == 0
            assert result.stdout.splitlines() == ["Done", "END"]

    def test_request_conflict_json(self):
        with patch("radiocore.cli.commands.engine.session") as mock_session, patch(
            "radiocore.usecases.engine_control.request_track",
            side_effect=QueueConflict("Song(s) still pending in request queue."),
        ):
            mock_session.return_value.__enter__.return_value = MagicMock()

            result = self.runner.invoke(app, ["engine", "request", "1", "/media/a.mp3", "--json"])

            assert result.exit_code == 1
            assert json.loads(result.stdout) == {
                "status": "error",
                "error": "Song(s) still pending in request queue.",
            }

    def test_connection_failure(self):
        with patch("radiocore.cli.commands.engine.session") as mock_session, patch(
            "radiocore.usecases.engine_control.send_command",
            side_effect=ConnectionFailure("Control connection to localhost:8004 failed"),
        ):
            mock_session.return_value.__enter__.return_value = MagicMock()

            result = self.runner.invoke(app, ["engine", "command", "1", "help"])

            assert result.exit_code == 1
            assert "Error: Control connection to localhost:8004 failed" in result.output

    def test_reload_playlist_arguments(self):
        with patch("radiocore.cli.commands.engine.session") as mock_session, patch(
            "radiocore.usecases.engine_control.reload_playlist"
        ) as mock_uc:
            db = MagicMock()
            mock_session.return_value.__enter__.return_value = db
            mock_uc.return_value = {"station_id": 1, "command": "reload", "response": ["OK"]}

            result = self.runner.invoke(app, ["engine", "reload-playlist", "1", "7"])

            assert result.exit_code == 0
            mock_uc.assert_called_once_with(db, 1, 7)
