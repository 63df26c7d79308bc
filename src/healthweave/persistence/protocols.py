"""Persistence backend protocol shared by the report store and the audit trail."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IPersistenceBackend(Protocol):
    """String key to string value store (memory, local files, S3)."""

    def save(self, key: str, data: str) -> None:
        """Store ``data`` under ``key``, replacing any previous value."""
        ...

    def load(self, key: str) -> str:
        """Return the value for ``key``. Raises KeyError if absent."""
        ...

    def exists(self, key: str) -> bool:
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``; absent keys are ignored."""
        ...

    def list_keys(self, prefix: str = "") -> list[str]:
        """Sorted keys starting with ``prefix``."""
        ...
