"""Option models and user settings for mcpinstall."""

from mcpinstall.config.parser import ConfigError, get_settings_path, load_settings
from mcpinstall.config.schemas import InstallerSettings, InstallOptions, ServerEntry

__all__ = [
    "ConfigError",
    "InstallOptions",
    "InstallerSettings",
    "ServerEntry",
    "get_settings_path",
    "load_settings",
]
