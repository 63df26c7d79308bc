"""Dict-backed persistence for tests and the ``memory`` backend setting."""

from __future__ import annotations

import logging
import threading

log = logging.getLogger(__name__)


class MemoryPersistenceBackend:
    """Keeps everything in a process-local dict guarded by a lock."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, key: str, data: str) -> None:
        with self._lock:
            self._store[key] = data
        log.debug("Saved %s to memory store (%d chars)", key, len(data))

    def load(self, key: str) -> str:
        with self._lock:
            try:
                return self._store[key]
            except KeyError:
                raise KeyError(f"Not found in memory store: {key}") from None

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def list_keys(self, prefix: str = "") -> list[str]:
        with self._lock:
            return sorted(k for k in self._store if k.startswith(prefix))
