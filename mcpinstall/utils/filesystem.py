"""Filesystem utilities for mcpinstall."""

import contextlib
import logging
import os
import stat
import tempfile
import time
from collections.abc import Iterator
from pathlib import Path

from mcpinstall.utils.platform import is_windows

logger = logging.getLogger(__name__)

# Mode for configuration files we create from scratch
DEFAULT_FILE_MODE = 0o600

LOCK_POLL_INTERVAL = 0.1


class LockTimeout(Exception):
    """Raised by file_lock when the lock is not acquired in time."""


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_file_mode(path: Path) -> int | None:
    """Return the permission bits of a file, or None if it does not exist."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return None


def atomic_write_bytes(path: Path, data: bytes, mode: int = DEFAULT_FILE_MODE) -> None:
    """Write data to path so readers never observe a partial file.

    The content goes to a temporary file in the same directory, is flushed
    to disk, given ``mode`` and then renamed over ``path``. On failure the
    temporary file is removed and ``path`` is left untouched.

    Args:
        path: Destination file
        data: Bytes to write
        mode: Permission bits for the resulting file
    """
    tmp_file = tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    tmp_path = Path(tmp_file.name)
    try:
        with tmp_file:
            tmp_file.write(data)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise


def atomic_write_text(path: Path, content: str, mode: int = DEFAULT_FILE_MODE) -> None:
    """Text variant of atomic_write_bytes (UTF-8)."""
    atomic_write_bytes(path, content.encode("utf-8"), mode)


@contextlib.contextmanager
def file_lock(path: Path, timeout: float = 1.0) -> Iterator[None]:
    """Hold an advisory exclusive lock on ``<path>.lock``.

    The lock lives in a sibling file so that atomic replacement of ``path``
    does not invalidate it. Acquisition is polled until ``timeout`` seconds
    have passed. On Windows no lock is taken and callers rely on atomic
    writes alone.

    Raises:
        LockTimeout: If the lock cannot be acquired within ``timeout``
    """
    if is_windows():
        logger.debug("Advisory locking unavailable on Windows, skipping lock for %s", path)
        yield
        return

    import fcntl

    lock_path = path.with_name(path.name + ".lock")
    deadline = time.monotonic() + timeout

    with open(lock_path, "a") as lock_file:
        while True:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise LockTimeout(f"Timed out after {timeout:g}s waiting for {lock_path}")
                time.sleep(LOCK_POLL_INTERVAL)

        logger.debug("Acquired lock %s", lock_path)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            logger.debug("Released lock %s", lock_path)
