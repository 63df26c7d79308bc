"""Report retrieval and on-demand PDF rendering."""

from __future__ import annotations

import logging
from typing import Optional

from healthweave.formatters.protocols import IOutputFormatter
from healthweave.hooks import audit_hook
from healthweave.hooks.audit_hook import AuditHook
from healthweave.models import ParsedReport
from healthweave.services.report_store import ReportStore

log = logging.getLogger(__name__)


def pdf_filename(report_id: str) -> str:
    return f"healthweave-report-{report_id}.pdf"


class ReportService:
    """Reads stored reports for one requester and renders them on demand.

    Rendering never calls a provider; the stored markdown is enough.
    """

    def __init__(
        self,
        store: ReportStore,
        formatter: IOutputFormatter,
        audit: Optional[AuditHook] = None,
    ) -> None:
        self._store = store
        self._formatter = formatter
        self._audit = audit or AuditHook()

    def get(self, report_id: str, requester_id: str) -> ParsedReport:
        try:
            report = self._store.get(report_id, requester_id)
        except Exception:
            self._audit.log_event(requester_id, audit_hook.REPORT_VIEW, report_id, success=False)
            raise
        self._audit.log_event(requester_id, audit_hook.REPORT_VIEW, report_id)
        return report

    def list(self, requester_id: str, limit: int = 50) -> list[ParsedReport]:
        reports = self._store.list_for(requester_id, limit=limit)
        self._audit.log_event(requester_id, audit_hook.REPORTS_LIST, "reports", count=len(reports))
        return reports

    def render_pdf(self, report_id: str, requester_id: str) -> bytes:
        try:
            report = self._store.get(report_id, requester_id)
        except Exception:
            self._audit.log_event(requester_id, audit_hook.REPORT_DOWNLOAD, report_id, success=False)
            raise
        data = self._formatter.format(report)
        self._audit.log_event(requester_id, audit_hook.REPORT_DOWNLOAD, report_id, bytes=len(data))
        return data
