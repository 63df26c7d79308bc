"""Persist parsed reports, keyed by requester and report id."""

from __future__ import annotations

import logging
from urllib.parse import quote

from pydantic import ValidationError

from healthweave.exceptions import PersistenceError, ReportNotFoundError
from healthweave.models import ParsedReport
from healthweave.persistence.protocols import IPersistenceBackend

log = logging.getLogger(__name__)

_KEY_SEPARATOR = "__"


def _safe(part: str) -> str:
    """Percent-encode ``part`` so distinct ids never share a key.

    ``_`` and ``.`` are escaped too: the first would fake the separator, the
    second could form ``..`` in a file name.
    """
    encoded = quote(part, safe="@").replace("_", "%5F").replace(".", "%2E")
    return encoded or "anonymous"


class ReportStore:
    """Save and load :class:`ParsedReport` JSON through a persistence backend.

    A report is only visible to the requester that created it.
    """

    def __init__(self, backend: IPersistenceBackend) -> None:
        self._backend = backend

    @staticmethod
    def key_for(report_id: str, requester_id: str) -> str:
        return f"{_safe(requester_id)}{_KEY_SEPARATOR}{_safe(report_id)}"

    def save(self, report: ParsedReport) -> str:
        key = self.key_for(report.report_id, report.requester_id)
        try:
            self._backend.save(key, report.model_dump_json())
        except Exception as exc:
            raise PersistenceError(f"Could not save report {report.report_id}: {exc}") from exc
        log.info("Saved report %s for %s", report.report_id, report.requester_id)
        return key

    def get(self, report_id: str, requester_id: str) -> ParsedReport:
        """Load one report. Raises :class:`ReportNotFoundError` when absent."""
        key = self.key_for(report_id, requester_id)
        try:
            data = self._backend.load(key)
        except KeyError:
            raise ReportNotFoundError(f"Report not found: {report_id}") from None
        except Exception as exc:
            raise PersistenceError(f"Could not load report {report_id}: {exc}") from exc
        try:
            return ParsedReport.model_validate_json(data)
        except ValidationError as exc:
            raise PersistenceError(f"Stored report {report_id} is corrupt: {exc}") from exc

    def exists(self, report_id: str, requester_id: str) -> bool:
        return self._backend.exists(self.key_for(report_id, requester_id))

    def delete(self, report_id: str, requester_id: str) -> None:
        self._backend.delete(self.key_for(report_id, requester_id))

    def list_for(self, requester_id: str, limit: int = 50) -> list[ParsedReport]:
        """The requester's reports, newest first. Unreadable entries are skipped."""
        prefix = f"{_safe(requester_id)}{_KEY_SEPARATOR}"
        reports: list[ParsedReport] = []
        for key in self._backend.list_keys(prefix):
            try:
                reports.append(ParsedReport.model_validate_json(self._backend.load(key)))
            except (KeyError, ValidationError) as exc:
                log.warning("Skipping unreadable report %s: %s", key, exc)
        reports.sort(key=lambda r: r.created_at, reverse=True)
        return reports[:limit]
