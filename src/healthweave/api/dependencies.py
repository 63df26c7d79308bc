"""Shared request dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, Request

from healthweave.services.analysis_service import AnalysisService
from healthweave.services.report_service import ReportService


def get_requester_id(x_requester_id: Optional[str] = Header(default=None)) -> str:
    """Requester identity from ``X-Requester-Id``; authentication happens upstream."""
    return (x_requester_id or "").strip() or "anonymous"


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


def get_report_service(request: Request) -> ReportService:
    return request.app.state.report_service
