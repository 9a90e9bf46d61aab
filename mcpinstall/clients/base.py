"""Client descriptions and installation strategies.

Each supported client is described by an immutable ClientConfig that carries
exactly one installation strategy:

- JSONStrategy: edit the client's JSON configuration file directly
- CLIStrategy: run the client's own ``mcp add`` style command

The strategy is chosen when the registry is built; callers only ever call
``client.strategy.install(...)``.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from mcpinstall.core.cli_installer import install_via_cli
from mcpinstall.core.json_installer import install_json, normalize_mapping_key
from mcpinstall.errors import ClientConfigurationError

if TYPE_CHECKING:
    from mcpinstall.config.schemas import InstallOptions

# (server_name, command, args) -> argv
CommandBuilder = Callable[[str, str, list[str]], list[str]]


class InstallStrategy(ABC):
    """How a server entry gets into a client's configuration."""

    method: ClassVar[str]

    @abstractmethod
    def validate(self, client: "ClientConfig") -> None:
        """Raise ClientConfigurationError if ``client`` cannot use this strategy."""
        ...

    @abstractmethod
    def install(
        self,
        client: "ClientConfig",
        config_path: Path | None,
        options: "InstallOptions",
    ) -> None:
        """Register ``options.server_name`` with the client.

        Args:
            client: The client being configured
            config_path: Resolved configuration file, None for CLI-only clients
            options: Install options
        """
        ...


@dataclass(frozen=True)
class JSONStrategy(InstallStrategy):
    """Upsert the entry under a top-level mapping of a JSON config file."""

    mapping_key_prefix: str

    method: ClassVar[str] = "json"

    def validate(self, client: "ClientConfig") -> None:
        if not self.mapping_key_prefix.strip("/"):
            raise ClientConfigurationError(
                f"Client {client.name} has an empty mapping key prefix", client.name
            )
        normalize_mapping_key(self.mapping_key_prefix)
        if not client.candidate_paths:
            raise ClientConfigurationError(
                f"Client {client.name} edits a config file but has no candidate paths",
                client.name,
            )

    def install(
        self,
        client: "ClientConfig",
        config_path: Path | None,
        options: "InstallOptions",
    ) -> None:
        if config_path is None:
            raise ClientConfigurationError(
                f"No configuration file resolved for {client.name}", client.name
            )
        install_json(
            config_path,
            self.mapping_key_prefix,
            options.server_name,
            options.server_entry,
            lock_timeout=options.lock_timeout,
            client=client.name,
        )


@dataclass(frozen=True)
class CLIStrategy(InstallStrategy):
    """Delegate to the client's own install command."""

    command_builder: CommandBuilder | None

    method: ClassVar[str] = "cli"

    def validate(self, client: "ClientConfig") -> None:
        if self.command_builder is None:
            raise ClientConfigurationError(
                f"No install command configured for client {client.name}", client.name
            )

    def install(
        self,
        client: "ClientConfig",
        config_path: Path | None,
        options: "InstallOptions",
    ) -> None:
        install_via_cli(
            client,
            options.server_name,
            options.command,
            options.args,
            timeout=options.command_timeout,
        )


@dataclass(frozen=True)
class ClientConfig:
    """A client that mcpinstall knows how to configure.

    Attributes:
        client_type: Unique identifier (e.g. "cursor")
        name: Display name (e.g. "Cursor")
        alias_names: Case-insensitive lookup names; the first is the primary name
        candidate_paths: Config file templates, most likely location first
        strategy: How the server entry is installed
    """

    client_type: str
    name: str
    alias_names: tuple[str, ...]
    candidate_paths: tuple[str, ...]
    strategy: InstallStrategy

    def __post_init__(self) -> None:
        if not self.client_type:
            raise ClientConfigurationError("Client type cannot be empty")
        if not self.alias_names:
            raise ClientConfigurationError(
                f"Client {self.name} needs at least one alias name", self.name
            )
        self.strategy.validate(self)

    @property
    def primary_name(self) -> str:
        return self.alias_names[0]
