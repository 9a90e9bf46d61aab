"""Tests for mcpinstall.utils.filesystem module."""

import os
import stat
import sys
import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from mcpinstall.utils.filesystem import (
    DEFAULT_FILE_MODE,
    LockTimeout,
    atomic_write_bytes,
    atomic_write_text,
    ensure_directory,
    file_lock,
    get_file_mode,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX permissions")


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_nested_directories(self, temp_dir: Path):
        """Creates nested directories."""
        nested_dir = temp_dir / "a" / "b" / "c"

        result = ensure_directory(nested_dir)

        assert nested_dir.is_dir()
        assert result == nested_dir

    def test_handles_existing_directory(self, temp_dir: Path):
        """Handles existing directory without error."""
        assert ensure_directory(temp_dir) == temp_dir


class TestGetFileMode:
    """Tests for get_file_mode function."""

    def test_missing_file(self, temp_dir: Path):
        """Returns None for a missing file."""
        assert get_file_mode(temp_dir / "missing") is None

    @posix_only
    def test_returns_permission_bits(self, temp_dir: Path):
        """Returns only the permission bits."""
        path = temp_dir / "file"
        path.write_text("x")
        os.chmod(path, 0o640)

        assert get_file_mode(path) == 0o640


class TestAtomicWrite:
    """Tests for atomic_write_bytes and atomic_write_text."""

    def test_writes_new_file(self, temp_dir: Path):
        """Creates the file with the given content."""
        path = temp_dir / "config.json"

        atomic_write_text(path, '{"a": 1}\n')

        assert path.read_text() == '{"a": 1}\n'

    def test_replaces_existing_file(self, temp_dir: Path):
        """Replaces the content of an existing file."""
        path = temp_dir / "config.json"
        path.write_text("old")

        atomic_write_bytes(path, b"new")

        assert path.read_bytes() == b"new"

    @posix_only
    def test_default_mode(self, temp_dir: Path):
        """New files are owner read/write only by default."""
        path = temp_dir / "config.json"

        atomic_write_text(path, "{}")

        assert stat.S_IMODE(path.stat().st_mode) == DEFAULT_FILE_MODE

    @posix_only
    def test_applies_mode(self, temp_dir: Path):
        """The requested mode is applied."""
        path = temp_dir / "config.json"

        atomic_write_text(path, "{}", 0o644)

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_no_temp_files_left(self, temp_dir: Path):
        """No temporary files remain after a write."""
        path = temp_dir / "config.json"

        atomic_write_text(path, "{}")

        assert sorted(p.name for p in temp_dir.iterdir()) == ["config.json"]

    def test_failed_write_keeps_original(self, temp_dir: Path):
        """A failed rename leaves the original file and no temp file."""
        path = temp_dir / "config.json"
        path.write_text("original")

        with patch("mcpinstall.utils.filesystem.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                atomic_write_text(path, "new")

        assert path.read_text() == "original"
        assert sorted(p.name for p in temp_dir.iterdir()) == ["config.json"]


@posix_only
class TestFileLock:
    """Tests for file_lock context manager."""

    def test_creates_sibling_lock_file(self, temp_dir: Path):
        """The lock is held on <path>.lock."""
        path = temp_dir / "config.json"

        with file_lock(path):
            assert (temp_dir / "config.json.lock").exists()

    def test_reacquire_after_release(self, temp_dir: Path):
        """The lock can be taken again once released."""
        path = temp_dir / "config.json"

        with file_lock(path):
            pass
        with file_lock(path, timeout=0.1):
            pass

    def test_times_out_when_held(self, temp_dir: Path):
        """A second holder times out."""
        path = temp_dir / "config.json"

        with file_lock(path):
            start = time.monotonic()
            with pytest.raises(LockTimeout):
                with file_lock(path, timeout=0.3):
                    pass
            assert time.monotonic() - start >= 0.3

    def test_waits_for_release(self, temp_dir: Path):
        """A waiter acquires the lock once the holder releases it."""
        path = temp_dir / "config.json"
        acquired = threading.Event()
        release = threading.Event()

        def hold() -> None:
            with file_lock(path):
                acquired.set()
                release.wait(5)

        holder = threading.Thread(target=hold)
        holder.start()
        try:
            assert acquired.wait(5)
            threading.Timer(0.2, release.set).start()
            with file_lock(path, timeout=3.0):
                pass
        finally:
            release.set()
            holder.join(5)

    def test_skipped_on_windows(self, temp_dir: Path):
        """No lock file is used on Windows."""
        path = temp_dir / "config.json"

        with patch("mcpinstall.utils.filesystem.is_windows", return_value=True):
            with file_lock(path):
                pass

        assert not (temp_dir / "config.json.lock").exists()
