"""Install a server entry by editing a client's JSON configuration file.

The file is read under an advisory lock, parsed as JSONC, edited by splicing
only the affected member, and written back atomically with its original
permission bits. Comments, key order and unrelated formatting survive.
"""

import logging
from pathlib import Path

from mcpinstall.config.schemas import ServerEntry
from mcpinstall.errors import (
    ConfigParseError,
    LockTimeoutError,
    PatchApplyError,
    PathTraversalUnsupportedError,
    WriteFailedError,
)
from mcpinstall.utils import jsonc
from mcpinstall.utils.filesystem import (
    DEFAULT_FILE_MODE,
    LockTimeout,
    atomic_write_text,
    ensure_directory,
    file_lock,
    get_file_mode,
)

logger = logging.getLogger(__name__)


def normalize_mapping_key(prefix: str) -> str:
    """Turn a mapping prefix such as "/mcpServers" into a top-level key.

    A single leading slash is accepted for compatibility with JSON-pointer
    style prefixes. Keys may contain dots (e.g. "amp.mcpServers"); they are
    literal key names, not paths.

    Raises:
        PathTraversalUnsupportedError: If the prefix names a nested path
    """
    key = prefix[1:] if prefix.startswith("/") else prefix
    if "/" in key:
        raise PathTraversalUnsupportedError(prefix)
    return key


def _read_config(config_path: Path, client: str | None = None) -> str:
    """Read the config file; a missing or blank file reads as "{}"."""
    try:
        raw = config_path.read_bytes()
    except FileNotFoundError:
        logger.info("Config file %s not found, creating new one", config_path)
        return "{}"

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConfigParseError(
            f"Failed to parse existing config {config_path}: not valid UTF-8 ({e})",
            config_path,
            client,
        ) from e

    if not content.strip():
        return "{}"
    return content


def _parse(text: str, config_path: Path, client: str | None = None) -> jsonc.Document:
    try:
        doc = jsonc.parse_document(text)
    except jsonc.JSONCError as e:
        raise ConfigParseError(
            f"Failed to parse existing config {config_path}: {e}", config_path, client
        ) from e
    if not isinstance(doc.root, jsonc.Object):
        raise ConfigParseError(
            f"Failed to parse existing config {config_path}: top-level value must be an object",
            config_path,
            client,
        )
    return doc


def upsert_server_entry(text: str, mapping_key: str, server_name: str, entry: ServerEntry) -> str:
    """Return ``text`` with ``entry`` stored at ``mapping_key.server_name``.

    Args:
        text: Existing JSONC document (must be a top-level object)
        mapping_key: Top-level key holding server entries
        server_name: Key of this server inside the mapping
        entry: Server entry to insert or replace

    Raises:
        jsonc.JSONCError: If ``text`` is not valid JSONC
        PatchApplyError: If the mapping is not an object or the edit did not
            produce the expected document
    """
    value = entry.model_dump()

    doc = jsonc.parse_document(text)
    text = jsonc.normalize(doc)
    doc = jsonc.parse_document(text)
    root = doc.root
    if not isinstance(root, jsonc.Object):
        raise PatchApplyError("Top-level value is not an object")

    if root.find(mapping_key) is None:
        text = jsonc.set_member(text, root, mapping_key, {})
        root = jsonc.parse_document(text).root
        assert isinstance(root, jsonc.Object)

    mapping = root.find(mapping_key)
    if mapping is None or not isinstance(mapping.value, jsonc.Object):
        raise PatchApplyError(f"Existing {mapping_key!r} entry is not an object")

    text = jsonc.set_member(text, mapping.value, server_name, value)

    # The edit must round-trip to exactly the entry we meant to write
    try:
        written = jsonc.loads(text)[mapping_key][server_name]
    except (jsonc.JSONCError, KeyError, TypeError) as e:
        raise PatchApplyError(f"Patched document is invalid: {e}") from e
    if written != value:
        raise PatchApplyError(f"Patched entry for {server_name!r} does not match")

    if not text.endswith("\n"):
        text += jsonc.detect_newline(text)
    return text


def install_json(
    config_path: Path,
    mapping_key_prefix: str,
    server_name: str,
    entry: ServerEntry,
    lock_timeout: float = 1.0,
    client: str | None = None,
) -> None:
    """Add or replace a server entry in a JSON configuration file.

    Args:
        config_path: Client configuration file (created if missing)
        mapping_key_prefix: Top-level mapping holding servers, e.g. "mcpServers"
        server_name: Key to register the server under
        entry: Command and arguments the client should launch
        lock_timeout: Seconds to wait for the advisory lock
        client: Client display name for error context

    Raises:
        PathTraversalUnsupportedError: If the prefix is nested
        LockTimeoutError: If another writer holds the lock
        ConfigParseError: If the existing file is malformed
        PatchApplyError: If the entry could not be applied
        WriteFailedError: If the directory or file cannot be written
    """
    mapping_key = normalize_mapping_key(mapping_key_prefix)

    try:
        ensure_directory(config_path.parent)
    except OSError as e:
        raise WriteFailedError(
            f"Failed to create configuration directory {config_path.parent}: {e}",
            config_path,
            client,
        ) from e

    try:
        with file_lock(config_path, timeout=lock_timeout):
            text = _read_config(config_path, client)
            _parse(text, config_path, client)

            try:
                patched = upsert_server_entry(text, mapping_key, server_name, entry)
            except jsonc.JSONCError as e:
                raise PatchApplyError(f"Failed to apply patch: {e}", client) from e
            except PatchApplyError as e:
                if e.client is None:
                    e.client = client
                raise

            mode = get_file_mode(config_path)
            if mode is None:
                mode = DEFAULT_FILE_MODE

            try:
                atomic_write_text(config_path, patched, mode)
            except OSError as e:
                raise WriteFailedError(
                    f"Failed to write config file {config_path}: {e}", config_path, client
                ) from e
    except LockTimeout as e:
        raise LockTimeoutError(config_path, lock_timeout, client) from e
    except OSError as e:
        raise WriteFailedError(
            f"Failed to access config file {config_path}: {e}", config_path, client
        ) from e

    logger.info(
        "Added MCP server %r to %s under %r (command=%s)",
        server_name,
        config_path,
        mapping_key,
        entry.command,
    )
