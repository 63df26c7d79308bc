"""Data models for healthweave.

API-facing and persisted records are pydantic models; short-lived value
objects passed between pipeline stages are frozen dataclasses.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Inputs ───────────────────────────────────────────────────────────


class SourceDocument(BaseModel):
    """An uploaded document whose text has already been extracted."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    display_name: str
    mime_type: str = "text/plain"
    extracted_text: str = ""


@dataclass(frozen=True)
class PromptPair:
    """System instruction and user message sent to every provider."""

    system_instruction: str
    user_message: str

    @property
    def input_chars(self) -> int:
        return len(self.system_instruction) + len(self.user_message)


# ── Provider output ──────────────────────────────────────────────────


@dataclass(frozen=True)
class ModelInvocationResult:
    """Raw markdown from whichever provider answered, with provenance."""

    raw_text: str
    provider_identifier: str
    provider_name: str = "primary"
    elapsed_ms: int = 0


# ── Parsed report ────────────────────────────────────────────────────


class KeyValueRow(BaseModel):
    """One measured value from the quick-reference table."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    unit: str = ""
    reference_range: str = ""


class ParsedReport(BaseModel):
    """Structured report recovered from the model's markdown.

    ``key_findings`` and ``recommendations`` always hold at least one entry;
    a placeholder sentence stands in when nothing could be extracted.
    """

    model_config = ConfigDict(frozen=True)

    report_id: str = Field(default_factory=_new_id)
    requester_id: str = "anonymous"
    created_at: datetime = Field(default_factory=_utcnow)

    summary: str
    key_findings: list[str] = Field(min_length=1)
    clinical_correlations: Optional[str] = None
    recommendations: list[str] = Field(min_length=1)
    uncertainties: Optional[str] = None
    full_markdown: str = ""

    provider_identifier: str = ""
    document_names: list[str] = Field(default_factory=list)
    key_values: list[KeyValueRow] = Field(default_factory=list)
    questions_for_doctor: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


# ── Audit ────────────────────────────────────────────────────────────


class AuditEvent(BaseModel):
    """Append-only audit record."""

    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    actor_id: str
    action: str
    resource: str
    success: bool
    details: dict[str, Any] = Field(default_factory=dict)
