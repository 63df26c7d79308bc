"""Application services."""

from __future__ import annotations

from healthweave.services.analysis_service import AnalysisService
from healthweave.services.report_service import ReportService
from healthweave.services.report_store import ReportStore

__all__ = ["AnalysisService", "ReportService", "ReportStore"]
