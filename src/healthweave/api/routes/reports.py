"""Stored report endpoints: list, fetch, download as PDF."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from healthweave.api.dependencies import get_report_service, get_requester_id
from healthweave.models import ParsedReport
from healthweave.services.report_service import ReportService, pdf_filename

router = APIRouter(tags=["reports"])

_PREVIEW_CHARS = 200


class ReportListItem(BaseModel):
    report_id: str
    created_at: datetime
    summary_preview: str
    provider_identifier: str
    document_names: list[str] = Field(default_factory=list)


class ReportList(BaseModel):
    reports: list[ReportListItem]
    count: int


@router.get("/reports", response_model=ReportList)
async def list_reports(
    limit: int = Query(default=50, ge=1, le=200),
    requester_id: str = Depends(get_requester_id),
    service: ReportService = Depends(get_report_service),
) -> ReportList:
    reports = service.list(requester_id, limit=limit)
    items = [
        ReportListItem(
            report_id=r.report_id,
            created_at=r.created_at,
            summary_preview=r.summary[:_PREVIEW_CHARS],
            provider_identifier=r.provider_identifier,
            document_names=r.document_names,
        )
        for r in reports
    ]
    return ReportList(reports=items, count=len(items))


@router.get("/reports/{report_id}", response_model=ParsedReport)
async def get_report(
    report_id: str,
    requester_id: str = Depends(get_requester_id),
    service: ReportService = Depends(get_report_service),
) -> ParsedReport:
    return service.get(report_id, requester_id)


@router.get("/reports/{report_id}/pdf")
async def download_report(
    report_id: str,
    requester_id: str = Depends(get_requester_id),
    service: ReportService = Depends(get_report_service),
) -> Response:
    data = service.render_pdf(report_id, requester_id)
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(report_id)}"'},
    )
