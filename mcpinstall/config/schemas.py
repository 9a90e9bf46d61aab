"""Pydantic schemas for mcpinstall.

This module defines the data models for:
- install options passed to the installer
- the server entry written into client configuration files
- ~/.config/mcpinstall/config.yaml (user settings)
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Server Entry
# =============================================================================


class ServerEntry(BaseModel):
    """The unit written under a client's MCP servers mapping.

    Serializes as {"command": ..., "args": [...]} in that key order.
    """

    model_config = {"frozen": True}

    command: str
    args: list[str]


# =============================================================================
# Install Options
# =============================================================================


class InstallOptions(BaseModel):
    """Options for a single install invocation.

    ``args`` has no default: an empty list must be passed explicitly so that
    "no arguments" is never confused with "forgot to set arguments".
    """

    model_config = {"frozen": True}

    client_name: str
    server_name: str
    command: str
    args: list[str]
    create_backup: bool = True
    custom_config_path: Path | None = None
    lock_timeout: float = Field(default=1.0, gt=0)
    command_timeout: float | None = Field(default=120.0, gt=0)

    @field_validator("client_name", "server_name", "command")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @property
    def server_entry(self) -> ServerEntry:
        return ServerEntry(command=self.command, args=self.args)


# =============================================================================
# User Settings (config.yaml)
# =============================================================================


class InstallerSettings(BaseModel):
    """Defaults loaded from the user's settings file.

    Every field is optional; command-line options take precedence.
    """

    model_config = {"extra": "forbid"}

    server_name: str | None = None
    command: str | None = None
    args: list[str] | None = None
    create_backup: bool = True
    lock_timeout: float = Field(default=1.0, gt=0)
    command_timeout: float | None = Field(default=120.0, gt=0)
