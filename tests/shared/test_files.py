"""Tests for the atomic file writer."""

import os
from unittest.mock import patch

import pytest

from radiocore.shared.files import atomic_write_text


class TestAtomicWriteText:
    def test_replaces_existing_content(self, tmp_path):
        target = tmp_path / "config" / "program.liq"
        target.parent.mkdir()
        target.write_text("old")

        assert atomic_write_text(target, "new") == target
        assert target.read_text() == "new"
        assert os.listdir(target.parent) == ["program.liq"]

    def test_failed_write_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / "program.liq"
        target.write_text("old")

        # A lone surrogate cannot be encoded, so the write fails after the temp file exists.
        with pytest.raises(UnicodeEncodeError):
            atomic_write_text(target, "new \udc80")

        assert os.listdir(tmp_path) == ["program.liq"]
        assert target.read_text() == "old"

    def test_failed_rename_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / "program.liq"

        with patch("radiocore.shared.files.os.replace", side_effect=PermissionError("read-only")):
            with pytest.raises(PermissionError):
                atomic_write_text(target, "new")

        assert os.listdir(tmp_path) == []
