"""Resolution of client configuration file locations."""

import logging
import os
import re
from collections.abc import Sequence
from pathlib import Path

from mcpinstall.errors import ConfigPathNotFoundError
from mcpinstall.utils.platform import get_home_directory

logger = logging.getLogger(__name__)

# $VAR or ${VAR}
ENV_VAR_PATTERN = re.compile(r"\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))")


def expand_env_vars(value: str) -> str:
    """Expand $VAR and ${VAR} references.

    Undefined variables expand to the empty string, as in a POSIX shell.
    """

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, "")

    return ENV_VAR_PATTERN.sub(replace_var, value)


def expand_path(path: str) -> str:
    """Expand environment variables and a leading ``~`` in a path template.

    ``~`` is only expanded when it is the whole path or is followed by ``/``.

    Examples:
        >>> expand_path("~/.cursor/mcp.json")   # doctest: +SKIP
        '/home/user/.cursor/mcp.json'
        >>> expand_path("/srv/~/config.json")
        '/srv/~/config.json'
    """
    expanded = expand_env_vars(path)

    if expanded == "~":
        return get_home_directory()
    if expanded.startswith("~/"):
        return os.path.join(get_home_directory(), expanded[2:])
    return expanded


def resolve_config_path(paths: Sequence[str]) -> Path:
    """Pick the configuration file to operate on.

    Returns the first candidate that exists on disk. When none exist the
    first candidate is returned as the location to create.

    Args:
        paths: Ordered path templates

    Returns:
        Expanded path

    Raises:
        ConfigPathNotFoundError: If no candidates were given
    """
    if not paths:
        raise ConfigPathNotFoundError("No config paths provided")

    for template in paths:
        candidate = Path(expand_path(template))
        if candidate.exists():
            logger.info("Found existing config file: %s", candidate)
            return candidate

    default = Path(expand_path(paths[0]))
    logger.info("No existing config found, will create at default location: %s", default)
    return default
