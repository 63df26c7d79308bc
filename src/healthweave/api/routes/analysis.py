"""Analysis endpoint: documents in, parsed report out."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from healthweave.api.dependencies import get_analysis_service, get_requester_id
from healthweave.models import KeyValueRow, SourceDocument
from healthweave.services.analysis_service import AnalysisService

router = APIRouter(tags=["analysis"])


class DocumentIn(BaseModel):
    """A document whose text was extracted by the upload collaborator."""

    name: str = Field(min_length=1)
    text: str = ""
    mime_type: str = "text/plain"


class AnalyzeRequest(BaseModel):
    documents: list[DocumentIn] = Field(min_length=1)
    context: Optional[str] = None


class AnalyzeResponse(BaseModel):
    report_id: str
    created_at: datetime
    summary: str
    key_findings: list[str]
    clinical_correlations: Optional[str] = None
    recommendations: list[str]
    uncertainties: Optional[str] = None
    key_values: list[KeyValueRow] = Field(default_factory=list)
    questions_for_doctor: list[str] = Field(default_factory=list)
    provider_identifier: str
    document_names: list[str] = Field(default_factory=list)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    body: AnalyzeRequest,
    req: Request,
    requester_id: str = Depends(get_requester_id),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalyzeResponse:
    """Run the synthesis pipeline over the submitted documents."""
    max_documents = req.app.state.settings.api.max_documents
    if len(body.documents) > max_documents:
        raise HTTPException(
            status_code=400,
            detail=f"At most {max_documents} documents can be analyzed at once",
        )

    documents = [
        SourceDocument(display_name=doc.name, mime_type=doc.mime_type, extracted_text=doc.text)
        for doc in body.documents
    ]
    report = await service.analyze(documents, body.context, requester_id=requester_id)
    return AnalyzeResponse(
        report_id=report.report_id,
        created_at=report.created_at,
        summary=report.summary,
        key_findings=report.key_findings,
        clinical_correlations=report.clinical_correlations,
        recommendations=report.recommendations,
        uncertainties=report.uncertainties,
        key_values=report.key_values,
        questions_for_doctor=report.questions_for_doctor,
        provider_identifier=report.provider_identifier,
        document_names=report.document_names,
    )
