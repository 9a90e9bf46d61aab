"""Built-in client table and the command builders for CLI-managed clients."""

import json

from mcpinstall.clients.base import CLIStrategy, ClientConfig, JSONStrategy


def _require(server_name: str, command: str) -> None:
    if not server_name:
        raise ValueError("server name cannot be empty")
    if not command:
        raise ValueError("command cannot be empty")


def build_claude_code_command(server_name: str, command: str, args: list[str]) -> list[str]:
    """``claude mcp add`` at user scope, so the server is available in every project."""
    _require(server_name, command)
    return ["claude", "mcp", "add", "-s", "user", server_name, "--", command, *args]


def build_codex_command(server_name: str, command: str, args: list[str]) -> list[str]:
    _require(server_name, command)
    return ["codex", "mcp", "add", server_name, "--", command, *args]


def build_gemini_command(server_name: str, command: str, args: list[str]) -> list[str]:
    _require(server_name, command)
    return ["gemini", "mcp", "add", "-s", "user", server_name, command, *args]


def build_vscode_command(server_name: str, command: str, args: list[str]) -> list[str]:
    """VS Code takes the whole server definition as one JSON argument."""
    _require(server_name, command)
    definition = json.dumps(
        {"name": server_name, "command": command, "args": list(args)},
        separators=(",", ":"),
    )
    return ["code", "--add-mcp", definition]


BUILTIN_CLIENTS: tuple[ClientConfig, ...] = (
    ClientConfig(
        client_type="claude-code",
        name="Claude Code",
        alias_names=("claude-code",),
        # Only needed for backups; the claude CLI owns this file
        candidate_paths=("~/.claude.json",),
        strategy=CLIStrategy(build_claude_code_command),
    ),
    ClientConfig(
        client_type="cursor",
        name="Cursor",
        alias_names=("cursor",),
        candidate_paths=("~/.cursor/mcp.json",),
        strategy=JSONStrategy("mcpServers"),
    ),
    ClientConfig(
        client_type="windsurf",
        name="Windsurf",
        alias_names=("windsurf",),
        candidate_paths=("~/.codeium/windsurf/mcp_config.json",),
        strategy=JSONStrategy("mcpServers"),
    ),
    ClientConfig(
        client_type="codex",
        name="Codex",
        alias_names=("codex",),
        # TOML, written by the codex CLI itself
        candidate_paths=("$CODEX_HOME/config.toml", "~/.codex/config.toml"),
        strategy=CLIStrategy(build_codex_command),
    ),
    ClientConfig(
        client_type="gemini",
        name="Gemini CLI",
        alias_names=("gemini", "gemini-cli"),
        candidate_paths=("~/.gemini/settings.json",),
        strategy=CLIStrategy(build_gemini_command),
    ),
    ClientConfig(
        client_type="vscode",
        name="VS Code",
        alias_names=("vscode", "code", "vs-code"),
        candidate_paths=(),
        strategy=CLIStrategy(build_vscode_command),
    ),
    ClientConfig(
        client_type="antigravity",
        name="Antigravity",
        alias_names=("antigravity",),
        candidate_paths=("~/.gemini/antigravity/mcp_config.json",),
        strategy=JSONStrategy("mcpServers"),
    ),
    ClientConfig(
        client_type="kiro-cli",
        name="Kiro CLI",
        alias_names=("kiro-cli", "kiro"),
        candidate_paths=("~/.kiro/settings/mcp.json",),
        strategy=JSONStrategy("mcpServers"),
    ),
)
