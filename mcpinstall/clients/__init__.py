"""Client registry for mcpinstall.

The registry is built once at import time from the built-in client table and
is never mutated afterwards. Lookups are case-insensitive over every alias
name of every client.
"""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from mcpinstall.clients.base import (
    ClientConfig,
    CLIStrategy,
    CommandBuilder,
    InstallStrategy,
    JSONStrategy,
)
from mcpinstall.clients.builtin import BUILTIN_CLIENTS
from mcpinstall.errors import ClientConfigurationError, UnsupportedClientError


class ClientRegistry:
    """Immutable lookup table of supported clients."""

    def __init__(self, clients: Iterable[ClientConfig]):
        """Build the registry.

        Args:
            clients: Client descriptions, in display order

        Raises:
            ClientConfigurationError: If two clients share a type or an alias
        """
        self._clients = tuple(clients)

        index: dict[str, ClientConfig] = {}
        types: set[str] = set()
        for client in self._clients:
            if client.client_type in types:
                raise ClientConfigurationError(
                    f"Duplicate client type: {client.client_type}", client.name
                )
            types.add(client.client_type)

            for alias in client.alias_names:
                key = alias.lower()
                if key in index:
                    raise ClientConfigurationError(
                        f"Alias {alias!r} is used by both {index[key].name} and {client.name}",
                        client.name,
                    )
                index[key] = client

        self._index = MappingProxyType(index)

    def __iter__(self) -> Iterator[ClientConfig]:
        return iter(self._clients)

    def __len__(self) -> int:
        return len(self._clients)

    @property
    def clients(self) -> tuple[ClientConfig, ...]:
        return self._clients

    def alias_names(self) -> list[str]:
        """All alias names, in registry order."""
        return [alias for client in self._clients for alias in client.alias_names]

    def resolve(self, name: str) -> ClientConfig:
        """Find a client by any of its alias names (case-insensitive).

        Raises:
            UnsupportedClientError: If no client matches
        """
        client = self._index.get(name.lower())
        if client is None:
            raise UnsupportedClientError(name, self.alias_names())
        return client


SUPPORTED_CLIENTS = ClientRegistry(BUILTIN_CLIENTS)


def resolve_client(name: str) -> ClientConfig:
    """Look up a supported client by name.

    Args:
        name: Any alias of the client (e.g. "cursor", "VS-Code")

    Returns:
        The matching ClientConfig

    Raises:
        UnsupportedClientError: If the client is not supported
    """
    return SUPPORTED_CLIENTS.resolve(name)


def list_clients() -> list[ClientConfig]:
    """List all supported clients in registry order."""
    return list(SUPPORTED_CLIENTS.clients)


def get_valid_client_names() -> list[str]:
    """List every accepted client name, including aliases."""
    return SUPPORTED_CLIENTS.alias_names()


__all__ = [
    "CLIStrategy",
    "ClientConfig",
    "ClientRegistry",
    "CommandBuilder",
    "InstallStrategy",
    "JSONStrategy",
    "SUPPORTED_CLIENTS",
    "get_valid_client_names",
    "list_clients",
    "resolve_client",
]
