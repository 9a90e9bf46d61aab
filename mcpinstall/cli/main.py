"""Main CLI application for mcpinstall."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from mcpinstall import __version__
from mcpinstall.clients import ClientConfig, get_valid_client_names, list_clients, resolve_client
from mcpinstall.config.parser import ConfigError, get_settings_path, load_settings
from mcpinstall.config.schemas import InstallerSettings, InstallOptions
from mcpinstall.core.installer import InstallResult, install_for_client
from mcpinstall.errors import InstallError
from mcpinstall.utils.platform import get_executable_path

app = typer.Typer(
    name="mcpinstall",
    help="Register MCP servers with AI coding assistants",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

logger = logging.getLogger("mcpinstall")


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with source paths
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setLevel(level)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def get_settings() -> InstallerSettings:
    """Load user settings, exiting on a broken settings file."""
    try:
        return load_settings()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def select_client_interactively() -> ClientConfig | None:
    """Show a numbered client list and ask the user to pick one.

    Returns:
        The chosen client, or None if the user quit
    """
    clients = sorted(list_clients(), key=lambda c: c.name.lower())

    console.print("[bold]Select an MCP client to configure:[/bold]\n")
    for i, client in enumerate(clients, start=1):
        console.print(f"  [cyan]{i}.[/cyan] {client.name}")
    console.print()

    while True:
        try:
            answer = Prompt.ask(
                f"Client number (1-{len(clients)}, q to quit)",
                console=console,
                default="",
                show_default=False,
            )
        except EOFError:
            return None

        answer = answer.strip().lower()
        if answer in ("", "q", "quit"):
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(clients):
            return clients[int(answer) - 1]
        console.print(f"[yellow]Please enter a number between 1 and {len(clients)}[/yellow]")


def print_install_summary(result: InstallResult) -> None:
    """Print what was changed and what the user should do next."""
    client_name = escape(result.client.name)
    server_name = escape(result.server_name)
    print_success(f"Installed MCP server '{server_name}' for {client_name}")

    if result.managed_by_client:
        console.print(f"  Configuration managed by {client_name}")
    elif result.config_path is not None:
        console.print(f"  Configuration file: {escape(str(result.config_path))}")

    if result.backup_path is not None:
        console.print(f"  Backup created: {escape(str(result.backup_path))}")

    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  1. Restart {client_name} to load the new configuration")
    console.print(f"  2. The MCP server will be available as '{server_name}'")


@app.callback()
def callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug, -vvv debug with source paths)",
        ),
    ] = 0,
) -> None:
    """mcpinstall - register MCP servers with AI coding assistants."""
    setup_logging(verbose)


@app.command()
def version() -> None:
    """Show the mcpinstall version."""
    console.print(f"mcpinstall {__version__}")


@app.command()
def install(
    client: Annotated[
        str | None,
        typer.Argument(
            help=f"Client to configure ({', '.join(get_valid_client_names())}). "
            "Prompts for one when omitted.",
        ),
    ] = None,
    server_name: Annotated[
        str | None,
        typer.Option(
            "--server-name",
            "-n",
            help="Name to register the server under",
        ),
    ] = None,
    command: Annotated[
        str | None,
        typer.Option(
            "--command",
            "-c",
            help="Executable the client should launch (defaults to this mcpinstall)",
        ),
    ] = None,
    arg: Annotated[
        list[str] | None,
        typer.Option(
            "--arg",
            "-a",
            help="Argument passed to the server command (repeatable)",
        ),
    ] = None,
    no_backup: Annotated[
        bool,
        typer.Option(
            "--no-backup",
            help="Don't back up the existing configuration file",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config-path",
            help="Edit this configuration file instead of the client's default",
        ),
    ] = None,
) -> None:
    """Install an MCP server into a client's configuration.

    JSON-configured clients have their file edited in place, keeping
    comments and formatting. Clients with their own CLI are configured by
    running that CLI.
    """
    settings = get_settings()

    if client is None:
        selected = select_client_interactively()
        if selected is None:
            print_error("No client selected")
            raise typer.Exit(1)
        client_name = selected.primary_name
    else:
        try:
            client_name = resolve_client(client).primary_name
        except InstallError as e:
            print_error(str(e))
            raise typer.Exit(1) from e

    server_name = server_name or settings.server_name
    if not server_name:
        print_error(
            f"No server name given. Pass --server-name or set server_name in {get_settings_path()}"
        )
        raise typer.Exit(1)

    command = command or settings.command or get_executable_path()
    if arg is not None:
        args = list(arg)
    elif settings.args is not None:
        args = list(settings.args)
    else:
        args = []

    try:
        options = InstallOptions(
            client_name=client_name,
            server_name=server_name,
            command=command,
            args=args,
            create_backup=settings.create_backup and not no_backup,
            custom_config_path=config_path,
            lock_timeout=settings.lock_timeout,
            command_timeout=settings.command_timeout,
        )
    except ValueError as e:
        print_error(f"Invalid install options: {e}")
        raise typer.Exit(1) from e

    try:
        result = install_for_client(options)
    except InstallError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    print_install_summary(result)


@app.command(name="clients")
def list_supported_clients() -> None:
    """List supported MCP clients."""
    table = Table(title="Supported Clients")
    table.add_column("Client", style="cyan")
    table.add_column("Name")
    table.add_column("Aliases", style="dim")
    table.add_column("Method", style="green")
    table.add_column("Config Location", style="dim")

    for client in list_clients():
        aliases = ", ".join(client.alias_names[1:])
        location = client.candidate_paths[0] if client.candidate_paths else "-"
        table.add_row(client.primary_name, client.name, aliases, client.strategy.method, location)

    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
