"""Install a server by delegating to the client's own command line tool."""

import logging
import subprocess
from typing import TYPE_CHECKING

from mcpinstall.errors import CLICommandError, ClientConfigurationError

if TYPE_CHECKING:
    from mcpinstall.clients.base import ClientConfig

logger = logging.getLogger(__name__)


def install_via_cli(
    client: "ClientConfig",
    server_name: str,
    command: str,
    args: list[str],
    timeout: float | None = None,
) -> None:
    """Run a client's ``mcp add`` style command.

    stdout and stderr are captured together so that a failure report shows
    the tool's output in the order it was written.

    Args:
        client: Client whose strategy provides the command builder
        server_name: Name to register the server under
        command: Executable the client should launch
        args: Arguments for ``command``
        timeout: Seconds before the child is killed, None to wait forever

    Raises:
        ClientConfigurationError: If the client has no builder or it rejects the input
        CLICommandError: If the tool cannot be started, times out, or exits non-zero
    """
    client_name = client.name
    builder = getattr(client.strategy, "command_builder", None)
    if builder is None:
        raise ClientConfigurationError(
            f"No install command configured for client {client_name}", client_name
        )

    try:
        argv = builder(server_name, command, list(args))
    except ValueError as e:
        raise ClientConfigurationError(
            f"Cannot build install command for {client_name}: {e}", client_name
        ) from e
    if not argv:
        raise ClientConfigurationError(
            f"Install command for {client_name} is empty", client_name
        )

    logger.info("Running %s CLI: %s", client_name, " ".join(argv))

    try:
        result = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CLICommandError(
            client_name, argv, "", reason=f"{argv[0]!r} not found on PATH ({e})"
        ) from e
    except subprocess.TimeoutExpired as e:
        output = e.output or ""
        if isinstance(output, bytes):
            output = output.decode("utf-8", errors="replace")
        raise CLICommandError(
            client_name, argv, output, reason=f"timed out after {timeout:g}s"
        ) from e
    except OSError as e:
        raise CLICommandError(client_name, argv, "", reason=str(e)) from e

    if result.stdout:
        logger.debug("%s CLI output:\n%s", client_name, result.stdout.rstrip())

    if result.returncode != 0:
        logger.error("%s CLI exited with status %d", client_name, result.returncode)
        raise CLICommandError(client_name, argv, result.stdout or "", returncode=result.returncode)

    logger.info("Registered MCP server %r with %s", server_name, client_name)
