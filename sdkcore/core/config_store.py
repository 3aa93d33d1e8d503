"""
Account Configuration Store

Holds the flat key/value configuration the credential engine reads from.
Every load or publish produces a new immutable ConfigSnapshot; readers grab
the current snapshot without locking and never observe a half-built one.

Supported sources:
- Java-style .properties files (the SDK's historical sdk_config.properties)
- YAML files, nested mappings flattened into dotted keys
- Plain mappings via ConfigStore.publish()

Usage:
    store = ConfigStore()
    store.load("config/sdk_config.properties")
    snapshot = store.current_snapshot()
    snapshot["acct1.UserName"]
"""
import io
import os
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Optional, Tuple, Union

import yaml

from sdkcore.core.config import get_settings
from sdkcore.core.paths import get_config_path, is_using_external_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "sdk_config.properties"

_YAML_SUFFIXES = (".yaml", ".yml")
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class ConfigLoadError(ValueError):
    """Raised when a config source cannot be parsed into key/value pairs."""
    pass


class ConfigSnapshot(Mapping):
    """
    Immutable string -> string view of the configuration at one point in time.

    `version` increases with every publish on the owning store, so two
    snapshots with equal content are still distinguishable.
    """

    __slots__ = ("_data", "version", "source")

    def __init__(self, data: Mapping, version: int = 0, source: str = "<empty>"):
        self._data = MappingProxyType(dict(data))
        self.version = version
        self.source = source

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ConfigSnapshot(version={self.version}, source={self.source!r}, keys={len(self._data)})"


# ============================================================
# Parsers
# ============================================================

def _logical_lines(text: str) -> Iterator[str]:
    """Join backslash-continued lines, dropping blanks and comments."""
    buffer: Optional[str] = None
    for raw in text.splitlines():
        line = raw.lstrip()
        if buffer is None and (not line or line[0] in "#!"):
            continue

        trailing = len(line) - len(line.rstrip("\\"))
        continued = trailing % 2 == 1
        if continued:
            line = line[:-1]

        buffer = line if buffer is None else buffer + line
        if not continued:
            yield buffer
            buffer = None

    if buffer is not None:
        yield buffer


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\":
            out.append(char)
            i += 1
            continue

        i += 1
        if i >= len(text):
            break
        char = text[i]
        if char == "u":
            digits = text[i + 1:i + 5]
            if len(digits) != 4:
                raise ConfigLoadError(f"Malformed \\uXXXX escape: \\u{digits}")
            try:
                out.append(chr(int(digits, 16)))
            except ValueError:
                raise ConfigLoadError(f"Malformed \\uXXXX escape: \\u{digits}") from None
            i += 5
            continue
        out.append(_ESCAPES.get(char, char))
        i += 1
    return "".join(out)


def _split_key_value(line: str) -> Tuple[str, str]:
    """Split at the first unescaped '=', ':' or whitespace."""
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in "=:" or char.isspace():
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip()
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip()
    return key, rest


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse Java .properties text.

    Handles '#'/'!' comments, '=', ':' or whitespace separators,
    trailing-backslash continuations and \\t \\n \\r \\f \\\\ \\uXXXX escapes.
    Later duplicates win.
    """
    properties = {}
    for line in _logical_lines(text):
        key, value = _split_key_value(line)
        properties[_unescape(key)] = _unescape(value)
    return properties


def _flatten(data: Mapping, prefix: str = "") -> Iterator[Tuple[str, str]]:
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            yield from _flatten(value, dotted)
        elif value is None:
            yield dotted, ""
        elif isinstance(value, bool):
            yield dotted, "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            yield dotted, ",".join(str(item) for item in value)
        else:
            yield dotted, str(value)


def parse_yaml(text: str) -> Dict[str, str]:
    """Parse YAML text and flatten nested mappings into dotted keys."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML config: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigLoadError(
            f"YAML config must be a mapping at the top level, got {type(data).__name__}"
        )
    return dict(_flatten(data))


def _parse(text: str, suffix: str) -> Dict[str, str]:
    if suffix.lower() in _YAML_SUFFIXES:
        return parse_yaml(text)
    return parse_properties(text)


def _decode(raw: bytes, suffix: str, source: str) -> str:
    """
    Decode file bytes as UTF-8.

    .properties files that are not valid UTF-8 are read as ISO-8859-1,
    Java's historical Properties encoding. YAML must be UTF-8.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        if suffix.lower() in _YAML_SUFFIXES:
            raise ConfigLoadError(f"{source} is not valid UTF-8: {e}") from e
        logger.debug(f"{source} is not UTF-8, reading as ISO-8859-1")
        return raw.decode("latin-1")


# ============================================================
# Store
# ============================================================

class ConfigStore:
    """
    Owner of the current configuration snapshot.

    Publishing is serialized by a lock; reading is a single attribute load,
    so resolution threads never wait on a reload.
    """

    def __init__(self, initial: Optional[Mapping] = None, source: str = "<mapping>"):
        self._lock = threading.Lock()
        self._version = 0
        self._path: Optional[Path] = None
        self._snapshot = ConfigSnapshot({}, 0, "<empty>")
        if initial is not None:
            self.publish(initial, source)

    @property
    def path(self) -> Optional[Path]:
        """File the current snapshot was loaded from; None after a stream load or publish()."""
        return self._path

    def current_snapshot(self) -> ConfigSnapshot:
        return self._snapshot

    def publish(self, mapping: Mapping, source: str = "<mapping>") -> ConfigSnapshot:
        """Replace the current snapshot with a frozen copy of `mapping`."""
        return self._publish(mapping, source, path=None)

    def _publish(self, mapping: Mapping, source: str, path: Optional[Path]) -> ConfigSnapshot:
        data = {
            str(key): "" if value is None else str(value)
            for key, value in mapping.items()
        }
        with self._lock:
            self._version += 1
            snapshot = ConfigSnapshot(data, self._version, source)
            self._snapshot = snapshot
            self._path = path
        logger.info(f"Published config snapshot v{snapshot.version} from {source} ({len(snapshot)} keys)")
        return snapshot

    def load(self, source: Union[str, os.PathLike, io.IOBase, Any]) -> ConfigSnapshot:
        """
        Load a config file path or an open text/binary stream.

        The format is picked from the file suffix (.yaml/.yml for YAML,
        anything else is .properties). Loading replaces the whole snapshot;
        on failure the previous snapshot stays current.

        Raises:
            FileNotFoundError: If a path does not exist
            OSError: If a path cannot be read (directory, permissions)
            ConfigLoadError: If the content cannot be decoded or parsed
        """
        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            text = _decode(path.read_bytes(), path.suffix, str(path))
            data = _parse(text, path.suffix)
            return self._publish(data, str(path), path=path)

        raw = source.read()
        name = str(getattr(source, "name", "") or "<stream>")
        suffix = Path(name).suffix
        if isinstance(raw, bytes):
            raw = _decode(raw, suffix, name)
        data = _parse(raw, suffix)
        return self._publish(data, name, path=None)

    def reload(self) -> ConfigSnapshot:
        """Re-read the file last passed to load()."""
        if self._path is None:
            raise RuntimeError("ConfigStore was not loaded from a file; nothing to reload")
        logger.info(f"Reloading config from {self._path}")
        return self.load(self._path)


# Global store instance
_store: Optional[ConfigStore] = None
_store_lock = threading.Lock()


def _build_default_store() -> ConfigStore:
    settings = get_settings()
    store = ConfigStore()

    path = settings.config_file or get_config_path(DEFAULT_CONFIG_FILENAME)
    logger.debug(f"Account config: {path} (external CONFIG_DIR: {is_using_external_config()})")
    if path:
        store.load(path)
    else:
        logger.warning(
            f"No account config found ({DEFAULT_CONFIG_FILENAME}); "
            f"set SDK_CONFIG_FILE or CONFIG_DIR. Starting with an empty configuration"
        )
    return store


def get_config_store() -> ConfigStore:
    """
    Get the process-wide config store (singleton).

    Built on first access from settings; safe under concurrent first access.
    """
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = _build_default_store()
    return _store


def reset_config_store():
    """Drop the process-wide store (useful for testing)."""
    global _store
    with _store_lock:
        _store = None
