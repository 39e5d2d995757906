"""Tests for storage helper functions.

Tests cover:
- atomic_write: atomic whole-file writes and error mapping
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from paramstore.storage.errors import StorageError, StoragePermissionError
from paramstore.storage.helpers import atomic_write


class TestAtomicWrite:
    """Tests for atomic_write function."""

    def test_writes_string_content(self, tmp_path: Path) -> None:
        test_file = tmp_path / "test.conf"

        atomic_write(test_file, "port = 80\n")

        assert test_file.read_text() == "port = 80\n"

    def test_writes_bytes_content(self, tmp_path: Path) -> None:
        test_file = tmp_path / "test.bin"

        atomic_write(test_file, b"\x00\x01binary")

        assert test_file.read_bytes() == b"\x00\x01binary"

    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        test_file = tmp_path / "test.conf"
        test_file.write_text("old")

        atomic_write(test_file, "new")

        assert test_file.read_text() == "new"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        test_file = tmp_path / "a" / "b" / "test.conf"

        atomic_write(test_file, "x")

        assert test_file.read_text() == "x"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        atomic_write(tmp_path / "test.conf", "x")

        assert [p.name for p in tmp_path.iterdir()] == ["test.conf"]

    def test_permission_error(self, tmp_path: Path) -> None:
        with (
            patch("tempfile.NamedTemporaryFile", side_effect=PermissionError("denied")),
            pytest.raises(StoragePermissionError, match="permission denied"),
        ):
            atomic_write(tmp_path / "test.conf", "x")

    def test_replace_failure_cleans_up(self, tmp_path: Path) -> None:
        """A failed rename keeps the old content and removes the temp file."""
        test_file = tmp_path / "test.conf"
        test_file.write_text("old")

        with (
            patch.object(Path, "replace", side_effect=OSError("cross-device link")),
            pytest.raises(StorageError, match="cross-device link"),
        ):
            atomic_write(test_file, "new")

        assert test_file.read_text() == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["test.conf"]

    def test_parent_is_a_file(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(StorageError, match="Failed to create directory"):
            atomic_write(blocker / "test.conf", "x")
