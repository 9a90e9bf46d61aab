"""Shared fixtures for mcpinstall tests."""

import json
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="mcpinstall_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def home_dir(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so no real client config is touched."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CODEX_HOME", raising=False)
    monkeypatch.delenv("MCPINSTALL_CONFIG", raising=False)
    return home


@pytest.fixture
def existing_config(temp_dir: Path) -> Path:
    """A client config file that already registers one other server."""
    path = temp_dir / "mcp.json"
    path.write_text(
        json.dumps(
            {
                "theme": "dark",
                "mcpServers": {"other": {"command": "x", "args": ["y"]}},
            },
            indent=2,
        )
        + "\n"
    )
    return path
