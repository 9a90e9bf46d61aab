"""Exception types raised while installing MCP server configurations."""

from pathlib import Path


class InstallError(Exception):
    """Base error for MCP server installation."""

    def __init__(self, message: str, client: str | None = None):
        self.client = client
        super().__init__(message)


class UnsupportedClientError(InstallError):
    """The requested client name does not match any registered client."""

    def __init__(self, name: str, supported: list[str]):
        self.name = name
        self.supported = sorted(supported)
        super().__init__(
            f"Unsupported client: {name}. Supported clients: {', '.join(self.supported)}"
        )


class ClientConfigurationError(InstallError):
    """A registry entry is inconsistent (e.g. a CLI client without a builder)."""


class ConfigPathNotFoundError(InstallError):
    """No candidate configuration paths were available to resolve."""


class ConfigParseError(InstallError):
    """An existing configuration file is not valid relaxed JSON."""

    def __init__(self, message: str, path: Path, client: str | None = None):
        self.path = path
        super().__init__(message, client)


class PathTraversalUnsupportedError(InstallError):
    """A nested mapping key prefix was requested."""

    def __init__(self, prefix: str, client: str | None = None):
        self.prefix = prefix
        super().__init__(
            f"Nested mapping paths are not supported, got: {prefix!r}", client
        )


class BackupWriteError(InstallError):
    """Snapshotting the configuration file failed."""

    def __init__(self, message: str, path: Path, client: str | None = None):
        self.path = path
        super().__init__(message, client)


class PatchApplyError(InstallError):
    """Inserting or replacing the server entry violated an internal invariant."""


class WriteFailedError(InstallError):
    """The final atomic write of the configuration file failed."""

    def __init__(self, message: str, path: Path, client: str | None = None):
        self.path = path
        super().__init__(message, client)


class LockTimeoutError(InstallError):
    """The advisory lock on a configuration file could not be acquired in time."""

    def __init__(self, path: Path, timeout: float, client: str | None = None):
        self.path = path
        self.timeout = timeout
        super().__init__(
            f"Failed to acquire lock on {path}: timeout after {timeout:g}s "
            "(is another install running?)",
            client,
        )


class CLICommandError(InstallError):
    """A delegated install command failed, could not start, or timed out."""

    def __init__(
        self,
        client: str,
        command: list[str],
        output: str,
        returncode: int | None = None,
        reason: str | None = None,
    ):
        self.command = list(command)
        self.output = output
        self.returncode = returncode

        if reason is None:
            reason = f"exited with status {returncode}"
        captured = output.strip() or "(no output)"
        message = (
            f"Failed to run {client} CLI command: {reason}\n"
            f"  Command: {' '.join(self.command)}\n"
            f"  Output: {captured}"
        )
        super().__init__(message, client)
