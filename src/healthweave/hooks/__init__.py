"""Cross-cutting hooks: structured logging and the audit trail."""

from __future__ import annotations

from healthweave.hooks.audit_hook import AuditHook
from healthweave.hooks.logging_config import bind_request_context, clear_request_context, setup_logging

__all__ = ["AuditHook", "bind_request_context", "clear_request_context", "setup_logging"]
