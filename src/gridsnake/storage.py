"""Key-value persistence backends with external change notification."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
import json
import logging

from .utils import DATA_DIR, ensure_data_dir, load_json, save_json

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, Any], None]


class KeyValueStore:
    """Durable key-value store contract shared by all backends.

    Reads never raise: a missing or unreadable record yields the supplied
    default. Writes and removals that fail are logged and reported through
    the boolean return value so callers on the tick path keep running.
    Subscribers hear about changes made by *another* session only; a
    store's own writes are not echoed back.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[ChangeCallback]] = {}

    def read(self, key: str, default: Any) -> Any:
        """Return the stored value for key or default."""
        try:
            return self._read(key, default)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Error reading key %r: %s", key, exc)
            return default

    def write(self, key: str, value: Any) -> bool:
        """Persist value under key; return False if the write failed."""
        try:
            self._write(key, value)
        except (OSError, ValueError, TypeError) as exc:
            logger.error("Error writing key %r: %s", key, exc)
            return False
        return True

    def remove(self, key: str) -> bool:
        """Delete key; return False if the removal failed."""
        try:
            self._remove(key)
        except OSError as exc:
            logger.error("Error removing key %r: %s", key, exc)
            return False
        return True

    def subscribe(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register for external changes to key and return an unsubscribe hook."""
        self._subscribers.setdefault(key, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def _notify(self, key: str, value: Any) -> None:
        for callback in list(self._subscribers.get(key, [])):
            callback(key, value)

    def _read(self, key: str, default: Any) -> Any:
        raise NotImplementedError

    def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def _remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """In-process store; values are kept as JSON text like a browser would."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._items: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._items[key] = json.dumps(value)

    def _read(self, key: str, default: Any) -> Any:
        if key not in self._items:
            return default
        return json.loads(self._items[key])

    def _write(self, key: str, value: Any) -> None:
        self._items[key] = json.dumps(value)

    def _remove(self, key: str) -> None:
        self._items.pop(key, None)

    def apply_external_write(self, key: str, value: Any) -> None:
        """Simulate another session writing key, notifying subscribers."""
        self._items[key] = json.dumps(value)
        if value is not None:
            self._notify(key, value)


class JsonFileStore(KeyValueStore):
    """One JSON document per key inside a data directory."""

    def __init__(self, directory: Path = DATA_DIR) -> None:
        super().__init__()
        self.directory = directory
        self._mtimes: dict[str, int] = {}
        ensure_data_dir(self.directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _read(self, key: str, default: Any) -> Any:
        path = self.path_for(key)
        value = load_json(path, default)
        self._remember_mtime(key)
        return value

    def _write(self, key: str, value: Any) -> None:
        save_json(self.path_for(key), value)
        self._remember_mtime(key)

    def _remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
        self._mtimes.pop(key, None)

    def _remember_mtime(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            self._mtimes[key] = path.stat().st_mtime_ns

    def poll_external_changes(self) -> list[str]:
        """Notify subscribers of keys whose file was rewritten by someone else."""
        changed: list[str] = []
        for key in list(self._subscribers):
            path = self.path_for(key)
            try:
                mtime = path.stat().st_mtime_ns
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Could not stat %s: %s", path, exc)
                continue
            if self._mtimes.get(key) == mtime:
                continue
            self._mtimes[key] = mtime
            value = load_json(path, None)
            if value is None:
                continue
            logger.debug("External change detected for %r", key)
            changed.append(key)
            self._notify(key, value)
        return changed
