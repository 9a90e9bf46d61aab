"""Platform and OS detection utilities."""

import os
import platform
import shutil
import sys
from typing import Literal

PlatformOS = Literal["windows", "linux", "macos"]


def get_os() -> PlatformOS:
    """Get the current operating system.

    Returns:
        One of: "windows", "linux", "macos"
    """
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    elif system == "windows":
        return "windows"
    else:
        return "linux"


def is_windows() -> bool:
    """Check if the current OS is Windows.

    Returns:
        True if running on Windows
    """
    return get_os() == "windows"


def get_home_directory() -> str:
    """Get the user's home directory.

    Returns:
        Path to the home directory
    """
    return os.path.expanduser("~")


def get_executable_path(name: str = "mcpinstall") -> str:
    """Get the path of the running mcpinstall executable.

    Prefers the console script found on PATH, then the script that started
    this process. Falls back to the bare name so clients resolve it via PATH.

    Args:
        name: Console script name

    Returns:
        Absolute path to the executable, or ``name`` if it cannot be located
    """
    found = shutil.which(name)
    if found:
        return os.path.abspath(found)

    argv0 = sys.argv[0] if sys.argv else ""
    if argv0 and os.path.basename(argv0) == name and os.path.isfile(argv0):
        return os.path.abspath(argv0)

    return name
