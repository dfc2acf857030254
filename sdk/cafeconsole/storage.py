"""Scoped key-value stores backing the credential store"""
import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class KeyValueStore:
    """String key/value storage area. Subclasses must never raise on read."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Ephemeral store; contents disappear with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class FileStore(KeyValueStore):
    """Persistent store kept as one JSON object in a file.

    A missing, unreadable or corrupt file reads as an empty store. Writes
    replace the file atomically.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError:
            return {}
        except UnicodeDecodeError:
            logger.warning("Ignoring undecodable session file", extra={"path": str(self.path)})
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt session file", extra={"path": str(self.path)})
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)
