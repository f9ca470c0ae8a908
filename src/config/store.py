"""Persisted key/value store for EVE Settings Manager.

Holds everything scoped to a server or profile: links, groups, cached
character names, descriptions and last-used selections. Keys are dotted
paths (``savedFolder.tranquility``) or tuples of path segments, stored as
nested JSON objects. A tuple segment is taken verbatim, so profile names
containing dots stay one level.
"""

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from src.config.paths import get_store_path

logger = logging.getLogger("eve_settings.store")

StoreKey = Union[str, Sequence[str]]


class SettingsStore:
    """Thread-safe dotted-key JSON store."""

    def __init__(self, store_path: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            store_path: Optional custom path, defaults to platform standard
        """
        self._store_path = store_path or get_store_path()
        self._data: Optional[dict] = None
        self._lock = threading.RLock()

    @property
    def store_path(self) -> Path:
        """Path to the store file."""
        return self._store_path

    def _load(self) -> dict:
        if self._data is not None:
            return self._data

        data = {}
        if self._store_path.exists():
            try:
                with open(self._store_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Store file unreadable, starting empty: {e}")
                data = {}
            if not isinstance(data, dict):
                logger.warning("Store file does not hold an object, starting empty")
                data = {}

        self._data = data
        return self._data

    def _flush(self) -> None:
        try:
            self._store_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._store_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
        except OSError:
            # Drop the unsaved change; the next access reloads from disk
            self._data = None
            raise

    @staticmethod
    def _split(key: StoreKey) -> list:
        if isinstance(key, str):
            parts = [p for p in key.split(".") if p]
        else:
            parts = [str(p) for p in key]
        if not parts:
            raise ValueError("Store key must not be empty")
        return parts

    def read(self, key: StoreKey, default: Any = None) -> Any:
        """
        Read a value.

        Args:
            key: Dotted key or tuple of segments
            default: Value returned when the key is absent

        Returns:
            A copy of the stored value, or default
        """
        with self._lock:
            node: Any = self._load()
            for part in self._split(key):
                if not isinstance(node, dict) or part not in node:
                    return default
                node = node[part]
            return copy.deepcopy(node)

    def save(self, key: StoreKey, value: Any) -> None:
        """
        Write a value and persist the store.

        Args:
            key: Dotted key or tuple of segments
            value: JSON-serializable value

        Raises:
            OSError: If the store file cannot be written
        """
        with self._lock:
            parts = self._split(key)
            node = self._load()
            for part in parts[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[parts[-1]] = copy.deepcopy(value)
            self._flush()

    def delete(self, key: StoreKey) -> bool:
        """
        Remove a value.

        Returns:
            True if the key existed
        """
        with self._lock:
            parts = self._split(key)
            node: Any = self._load()
            for part in parts[:-1]:
                if not isinstance(node, dict) or part not in node:
                    return False
                node = node[part]
            if not isinstance(node, dict) or parts[-1] not in node:
                return False
            del node[parts[-1]]
            self._flush()
            return True

    def has(self, key: StoreKey) -> bool:
        """True if a value is stored under key."""
        sentinel = object()
        return self.read(key, sentinel) is not sentinel

    def clear(self) -> None:
        """
        Drop every stored value and remove the store file.

        Raises:
            OSError: If the store file cannot be removed
        """
        with self._lock:
            if self._store_path.exists():
                self._store_path.unlink()
            self._data = {}
