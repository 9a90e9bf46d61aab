"""Top-level install flow: resolve client, pick file, back up, install."""

import logging
from dataclasses import dataclass
from pathlib import Path

from mcpinstall.clients import ClientConfig, resolve_client
from mcpinstall.config.schemas import InstallOptions
from mcpinstall.core.backup import create_config_backup
from mcpinstall.core.paths import resolve_config_path

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Outcome of a successful install.

    Attributes:
        client: The client that was configured
        server_name: Name the server was registered under
        config_path: File that was edited (or backed up for CLI clients),
            None if the client keeps no known file
        backup_path: Snapshot taken before the change, if any
        method: "json" or "cli"
    """

    client: ClientConfig
    server_name: str
    config_path: Path | None
    backup_path: Path | None
    method: str

    @property
    def managed_by_client(self) -> bool:
        """True if the client's own tool wrote the configuration."""
        return self.method == "cli"


def _determine_config_path(client: ClientConfig, options: InstallOptions) -> Path | None:
    if options.custom_config_path is not None:
        path = options.custom_config_path.expanduser()
        logger.info("Using custom config path: %s", path)
        return path
    if client.candidate_paths:
        return resolve_config_path(client.candidate_paths)
    return None


def install_for_client(options: InstallOptions) -> InstallResult:
    """Install an MCP server entry into one client's configuration.

    Args:
        options: What to install and where

    Returns:
        InstallResult describing what changed

    Raises:
        InstallError: Any subclass, depending on which step failed. Nothing
            is modified if the backup step fails.
    """
    client = resolve_client(options.client_name)
    logger.info(
        "Installing MCP server %r for %s (method=%s)",
        options.server_name,
        client.name,
        client.strategy.method,
    )

    config_path = _determine_config_path(client, options)

    backup_path = None
    if options.create_backup and config_path is not None:
        backup_path = create_config_backup(config_path)

    client.strategy.install(client, config_path, options)

    logger.info(
        "Installed MCP server %r for %s (config=%s, backup=%s)",
        options.server_name,
        client.name,
        config_path,
        backup_path,
    )
    return InstallResult(
        client=client,
        server_name=options.server_name,
        config_path=config_path,
        backup_path=backup_path,
        method=client.strategy.method,
    )
