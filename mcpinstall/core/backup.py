"""Pre-mutation snapshots of client configuration files."""

import contextlib
import logging
import os
import stat
import time
from pathlib import Path

from mcpinstall.errors import BackupWriteError

logger = logging.getLogger(__name__)


def get_backup_path(config_path: Path, timestamp: int | None = None) -> Path:
    """Return ``<config_path>.backup.<timestamp>``.

    The timestamp defaults to nanoseconds since the epoch so that backups
    taken back to back get distinct names.
    """
    if timestamp is None:
        timestamp = time.time_ns()
    return config_path.with_name(f"{config_path.name}.backup.{timestamp}")


def create_config_backup(config_path: Path) -> Path | None:
    """Copy a configuration file byte for byte before it is modified.

    The backup keeps the original file's permission bits. An existing file
    at the backup path is never overwritten.

    Args:
        config_path: File to snapshot

    Returns:
        Path of the backup, or None if ``config_path`` does not exist

    Raises:
        BackupWriteError: If the snapshot cannot be read or written
    """
    if not config_path.exists():
        logger.info("No existing configuration file at %s, skipping backup", config_path)
        return None

    try:
        data = config_path.read_bytes()
        mode = stat.S_IMODE(config_path.stat().st_mode)
    except OSError as e:
        raise BackupWriteError(
            f"Failed to read original config file {config_path}: {e}", config_path
        ) from e

    backup_path = get_backup_path(config_path)
    try:
        # "x" refuses to reuse a name, so an older backup is never clobbered
        with open(backup_path, "xb") as f:
            try:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            except OSError:
                with contextlib.suppress(OSError):
                    backup_path.unlink()
                raise
        os.chmod(backup_path, mode)
    except FileExistsError as e:
        raise BackupWriteError(
            f"Backup file already exists, refusing to overwrite: {backup_path}", backup_path
        ) from e
    except OSError as e:
        raise BackupWriteError(f"Failed to write backup file {backup_path}: {e}", backup_path) from e

    logger.info("Created configuration backup: %s", backup_path)
    return backup_path
