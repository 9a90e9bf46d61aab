"""Settings file parsing utilities."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mcpinstall.config.schemas import InstallerSettings
from mcpinstall.utils.platform import get_home_directory

SETTINGS_ENV_VAR = "MCPINSTALL_CONFIG"


class ConfigError(Exception):
    """Error loading or parsing mcpinstall settings."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def get_settings_path() -> Path:
    """Return the settings file location.

    ``$MCPINSTALL_CONFIG`` wins; otherwise ~/.config/mcpinstall/config.yaml.
    """
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(get_home_directory()) / ".config" / "mcpinstall" / "config.yaml"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
            if result is None:
                return {}
            if not isinstance(result, dict):
                raise ConfigError(f"YAML file must contain a mapping: {path}", path)
            return result
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load user settings, falling back to defaults when no file exists.

    Args:
        path: Settings file to read (defaults to get_settings_path())

    Returns:
        Parsed InstallerSettings

    Raises:
        ConfigError: If the file exists but is invalid
    """
    if path is None:
        path = get_settings_path()

    if not path.exists():
        return InstallerSettings()

    data = load_yaml(path)

    try:
        return InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}", path) from e
