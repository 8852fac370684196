"""Key/value storage port and the state load/persist helpers built on it.

The ledger only needs ``get_item``/``set_item``; `FileStorage` keeps one JSON
document per key on disk and `MemoryStorage` is a dict for tests and
ephemeral runs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol

from spendbook.models import State, create_initial_state
from spendbook.services.serialization import deserialize, serialize

logger = logging.getLogger("spendbook.store")


class PersistenceError(IOError):
    """Raised when the storage layer encounters unrecoverable issues."""


class StoragePort(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class FileStorage:
    """File-based storage with crash-safe writes (temp file + replace)."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = base_path
        self._base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._base_path / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path


class MemoryStorage:
    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


def load_state(
    storage: StoragePort,
    key: str,
    fallback: Callable[[], State] = create_initial_state,
) -> State:
    """Return the stored state, or ``fallback()`` when nothing usable is stored."""
    raw = storage.get_item(key)
    if not raw:
        return fallback()
    parsed = deserialize(raw)
    if not parsed.ok:
        logger.warning("stored state under %r is unreadable (%s); starting fresh", key, parsed.error)
        return fallback()
    return parsed.value


def persist_state(storage: StoragePort, key: str, state: State) -> None:
    storage.set_item(key, serialize(state))
