"""Audit hook: records every request-level action for traceability.

Audit writes must never fail the request they describe, so every error from
the backend is logged and dropped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from healthweave.models import AuditEvent

if TYPE_CHECKING:
    from healthweave.persistence.protocols import IPersistenceBackend

log = logging.getLogger(__name__)

# Action names written to the trail.
DOCUMENT_UPLOAD = "DOCUMENT_UPLOAD"
ANALYSIS_COMPLETE = "ANALYSIS_COMPLETE"
ANALYSIS_FAILED = "ANALYSIS_FAILED"
REPORT_VIEW = "REPORT_VIEW"
REPORTS_LIST = "REPORTS_LIST"
REPORT_DOWNLOAD = "REPORT_DOWNLOAD"


class AuditHook:
    """Logs audit events and optionally persists them.

    Parameters
    ----------
    backend:
        Optional persistence backend. When ``None`` events only go to the log.
    key_prefix:
        Prefix for persisted keys, e.g. ``"audit/"``.
    """

    def __init__(
        self,
        backend: IPersistenceBackend | None = None,
        key_prefix: str = "",
    ) -> None:
        self._backend = backend
        self._key_prefix = key_prefix

    def log_event(
        self,
        actor_id: str,
        action: str,
        resource: str,
        success: bool = True,
        **details: Any,
    ) -> AuditEvent | None:
        """Record one event. Returns the event, or ``None`` if it could not be built."""
        try:
            event = AuditEvent(
                actor_id=actor_id or "anonymous",
                action=action,
                resource=resource,
                success=success,
                details=details,
            )
        except Exception:
            log.exception("audit | could not build event action=%s resource=%s", action, resource)
            return None

        log.info(
            "audit | action=%s actor=%s resource=%s success=%s",
            event.action,
            event.actor_id,
            event.resource,
            event.success,
        )

        if self._backend is not None:
            key = f"{self._key_prefix}{event.timestamp.strftime('%Y%m%dT%H%M%S')}_{event.id}"
            try:
                self._backend.save(key, event.model_dump_json())
            except Exception:
                log.exception("audit | failed to persist event %s", event.id)
        return event
