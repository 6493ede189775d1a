"""Tests for live streamer use cases."""

from datetime import datetime, timedelta, timezone

import pytest

from radiocore.domain.entities import StationStreamer
from radiocore.usecases.streamers import (
    authenticate_streamer,
    get_engine_command,
    get_web_streaming_url,
    split_credentials,
    toggle_live_status,
)


@pytest.fixture
def streamer(db, station):
    streamer = StationStreamer(station=station, streamer_username="dj_anna", display_name="Anna")
    streamer.set_password("s3cret")
    db.add(streamer)
    db.flush()
    return streamer


class TestSplitCredentials:
    def test_plain_credentials_pass_through(self):
        assert split_credentials("dj", "pw") == ("dj", "pw")

    def test_comma_and_colon_joined(self):
        assert split_credentials("source", "dj,pw") == ("dj", "pw")
        assert split_credentials("source", "dj:pw") == ("dj", "pw")


class TestAuthenticateStreamer:
    def test_source_password_is_accepted(self, db, station):
        assert authenticate_streamer(db, station, "source", "hackme") == "true"
        assert station.current_streamer is None

    def test_valid_streamer_becomes_current(self, db, station, streamer):
        assert authenticate_streamer(db, station, "dj_anna", "s3cret") == "true"
        assert station.current_streamer is streamer

    def test_joined_credentials(self, db, station, streamer):
        assert authenticate_streamer(db, station, "shoutcast", "dj_anna:s3cret") == "true"

    @pytest.mark.parametrize("user, password", [("dj_anna", "wrong"), ("nobody", "s3cret"), ("", "")])
    def test_bad_credentials(self, db, station, streamer, user, password):
        assert authenticate_streamer(db, station, user, password) == "false"
        assert station.current_streamer is None

    def test_inactive_streamer_is_denied(self, db, station, streamer):
        streamer.is_active = False
        assert authenticate_streamer(db, station, "dj_anna", "s3cret") == "false"

    def test_deactivation_window(self, db, station, streamer):
        streamer.deactivate_for(600)
        assert authenticate_streamer(db, station, "dj_anna", "s3cret") == "false"

        streamer.reactivate_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        assert authenticate_streamer(db, station, "dj_anna", "s3cret") == "true"


class TestLiveStatus:
    def test_toggle(self, db, station):
        toggle_live_status(db, station, True)
        assert station.is_streamer_live is True
        toggle_live_status(db, station, False)
        assert station.is_streamer_live is False


class TestUrlsAndCommands:
    def test_web_streaming_url(self, station):
        assert get_web_streaming_url(station, "https://radio.example.com") == "wss://radio.example.com/radio/8005/"
        assert get_web_streaming_url(station, "http://example.com/azura/") == "wss://example.com/azura/radio/8005/"

    def test_engine_command(self, station, test_settings):
        assert get_engine_command(station, test_settings) == f"/usr/local/bin/liquidsoap {station.program_path}"

    def test_engine_command_without_binary(self, station, test_settings):
        test_settings.engine_binary = ""
        assert get_engine_command(station, test_settings) == "/bin/false"
