"""Key-value persistence for traits, auth token and tracking marker.

The dispatcher only ever writes through :class:`Storage`; reading back
happens once at startup via ``IterateClient.restore_persisted_state``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import Any, Protocol

_logger = logging.getLogger(__name__)


class StorageKey(StrEnum):
    USER_TRAITS = "userTraits"
    AUTH_TOKEN = "authToken"
    LAST_UPDATED = "lastUpdated"


class Storage(Protocol):
    """Structural persistence interface.

    Values must be JSON-serialisable. Implementations may raise; the
    dispatcher does not catch persistence failures.
    """

    def set(self, key: str, value: Any) -> None:
        ...

    def get(self, key: str, default: Any = None) -> Any:
        ...


class MemoryStorage:
    """Process-local storage; the default when no path is configured."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        self._values[str(key)] = copy.deepcopy(value)

    def get(self, key: str, default: Any = None) -> Any:
        if str(key) not in self._values:
            return default
        return copy.deepcopy(self._values[str(key)])


class JsonFileStorage:
    """Write-through storage backed by a single JSON document.

    The file is read lazily on first access and rewritten atomically
    (temp file + replace) on every ``set``.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._values: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if self._values is not None:
            return self._values
        values: dict[str, Any] = {}
        if self._path.exists():
            text = self._path.read_text(encoding="utf-8")
            if text.strip():
                loaded = json.loads(text)
                if isinstance(loaded, dict):
                    values = loaded
                else:
                    _logger.warning("Ignoring non-object storage file %s", self._path)
        self._values = values
        return values

    def set(self, key: str, value: Any) -> None:
        values = self._load()
        values[str(key)] = copy.deepcopy(value)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(values, separators=(",", ":")), encoding="utf-8")
        tmp_path.replace(self._path)
        _logger.debug("Persisted %s to %s", key, self._path)

    def get(self, key: str, default: Any = None) -> Any:
        values = self._load()
        if str(key) not in values:
            return default
        return copy.deepcopy(values[str(key)])
