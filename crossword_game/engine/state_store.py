"""Persistent game state history.

The store keeps every playthrough as one entry of a JSON array under a
single key of a key-value backend. The last entry is the current game.
Saving a state whose ``id`` matches the last entry replaces it; any other
state is appended.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..core.exceptions import StateStoreError
from ..core.models import GameState
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/collections/game_states")
DEFAULT_STATE_KEY = "gameStates"


class KeyValueBackend(Protocol):
    """Opaque string store used for persistence."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryBackend:
    """In-process backend, mostly for tests and ephemeral sessions."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileBackend:
    """One JSON file per key inside ``store_dir``.

    Writes go to a temporary file that is atomically moved into place.
    """

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.store_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.store_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self._path(key))
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class GameStateStore:
    """Save, load and clear :class:`GameState` history through a backend."""

    def __init__(self, backend: KeyValueBackend, key: str = DEFAULT_STATE_KEY) -> None:
        self.backend = backend
        self.key = key
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def save(self, state: GameState) -> None:
        with self._lock:
            history = self._read_raw()
            payload = state.to_dict()
            if history and history[-1].get("id") == state.id:
                history[-1] = payload
                LOGGER.debug("Replacing game state %s", state.id)
            else:
                history.append(payload)
                LOGGER.info("Appending game state %s (history size %d)", state.id, len(history))
            self._write_raw(history)

    def load(self) -> Optional[GameState]:
        history = self.load_history()
        return history[-1] if history else None

    def load_history(self) -> List[GameState]:
        with self._lock:
            raw = self._read_raw()
        try:
            return [GameState.from_dict(entry) for entry in raw]
        except (KeyError, TypeError, ValueError) as exc:
            raise StateStoreError(f"Corrupt game state entry: {exc}") from exc

    def clear(self) -> None:
        with self._lock:
            try:
                self.backend.delete(self.key)
            except OSError as exc:
                raise StateStoreError(f"Cannot clear game states: {exc}") from exc
        LOGGER.info("Cleared game state history")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------
    def _read_raw(self) -> List[dict]:
        try:
            text = self.backend.get(self.key)
        except OSError as exc:
            raise StateStoreError(f"Cannot read game states: {exc}") from exc
        if not text:
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StateStoreError(f"Game state payload is not JSON: {exc}") from exc
        if not isinstance(data, list):
            raise StateStoreError("Game state payload must be a list")
        if not all(isinstance(entry, dict) for entry in data):
            raise StateStoreError("Game state entries must be objects")
        return data

    def _write_raw(self, history: List[dict]) -> None:
        try:
            self.backend.set(self.key, json.dumps(history, ensure_ascii=False))
        except OSError as exc:
            raise StateStoreError(f"Cannot write game states: {exc}") from exc
