"""Pluggable persistence backends for reports and audit events."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from healthweave.persistence.file_backend import FilePersistenceBackend
from healthweave.persistence.memory_backend import MemoryPersistenceBackend
from healthweave.persistence.protocols import IPersistenceBackend

if TYPE_CHECKING:
    from healthweave.core.config import PersistenceConfig

__all__ = [
    "FilePersistenceBackend",
    "IPersistenceBackend",
    "MemoryPersistenceBackend",
    "create_backends",
]


def create_backends(config: PersistenceConfig) -> tuple[IPersistenceBackend, IPersistenceBackend]:
    """Build ``(report_backend, audit_backend)`` for the configured backend kind."""
    if config.backend == "memory":
        return MemoryPersistenceBackend(), MemoryPersistenceBackend()
    if config.backend == "s3":
        from healthweave.persistence.s3_backend import S3PersistenceBackend

        return (
            S3PersistenceBackend(config.s3_bucket, prefix=config.s3_prefix, region=config.s3_region),
            S3PersistenceBackend(config.s3_bucket, prefix=config.s3_audit_prefix, region=config.s3_region),
        )
    return FilePersistenceBackend(Path(config.store_path)), FilePersistenceBackend(Path(config.audit_path))
