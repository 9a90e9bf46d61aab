"""mcpinstall - register MCP servers with AI coding assistants."""

from mcpinstall.core.installer import InstallResult, install_for_client
from mcpinstall.errors import (
    BackupWriteError,
    ClientConfigurationError,
    CLICommandError,
    ConfigParseError,
    ConfigPathNotFoundError,
    InstallError,
    LockTimeoutError,
    PatchApplyError,
    PathTraversalUnsupportedError,
    UnsupportedClientError,
    WriteFailedError,
)

__version__ = "0.1.0"

__all__ = [
    "BackupWriteError",
    "CLICommandError",
    "ClientConfigurationError",
    "ConfigParseError",
    "ConfigPathNotFoundError",
    "InstallError",
    "InstallResult",
    "LockTimeoutError",
    "PatchApplyError",
    "PathTraversalUnsupportedError",
    "UnsupportedClientError",
    "WriteFailedError",
    "__version__",
    "install_for_client",
]
