"""Shared fixtures for healthweave tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from healthweave.core.config import (
    AppSettings,
    LocalProviderConfig,
    PersistenceConfig,
    PrimaryProviderConfig,
    SecondaryProviderConfig,
)
from healthweave.models import KeyValueRow, ParsedReport, SourceDocument

SAMPLE_MARKDOWN = """\
## Executive Summary
Mildly elevated liver enzymes with low platelets [DOC: 1]. No acute findings on imaging [DOC: 2].

## Key Values (Quick Reference)
| Test | Value | Unit | Reference |
|------|-------|------|-----------|
| ALT | 45 | U/L | 7-40 |
| Platelets | 120 | x10^3/uL | 150-400 |

## Key Findings
1. **Hepatic:** ALT 45 U/L (ref 7-40), mildly elevated [DOC: 1]
2. **Hematologic:** Platelets 120 x10^3/uL (ref 150-400), low [DOC: 1]
3. **Imaging:** Normal liver echogenicity [DOC: 2]

## Clinical Correlations
The mild ALT elevation and low platelets together warrant evaluation for early fibrosis [Guideline: AASLD 2023].

## Recommendations
1. **Repeat labs:** Recheck ALT and CBC in 3 months [Guideline: AASLD 2023]
2. **Hepatology referral:** If ALT remains elevated

## Questions for Your Doctor
1. Should I have an elastography scan?
2. Do any of my medications affect the liver?

## Uncertainties and Limitations
No prior labs are available to establish a trend.

## References
- [DOC: 1] Lab panel 2024-03-01
- [DOC: 2] Abdominal ultrasound 2024-03-05
- [Guideline: AASLD 2023] AASLD practice guidance
"""


@pytest.fixture
def sample_markdown() -> str:
    return SAMPLE_MARKDOWN


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    """Settings with in-memory persistence and no real providers configured."""
    return AppSettings(
        primary=PrimaryProviderConfig(model_id="test-model", aws_endpoint=""),
        secondary=SecondaryProviderConfig(api_key=""),
        local=LocalProviderConfig(enabled=False),
        persistence=PersistenceConfig(
            backend="memory",
            store_path=tmp_path / "reports",
            audit_path=tmp_path / "audit",
        ),
    )


@pytest.fixture
def sample_documents() -> list[SourceDocument]:
    return [
        SourceDocument(
            id="doc-1",
            display_name="lab_panel.txt",
            extracted_text="LABORATORY REPORT\nALT 45 U/L (7-40)\nPlatelets 120 (150-400)",
        ),
        SourceDocument(
            id="doc-2",
            display_name="abdomen_ultrasound.txt",
            extracted_text="Ultrasound of the abdomen. Liver echogenicity normal.",
        ),
    ]


@pytest.fixture
def sample_report() -> ParsedReport:
    return ParsedReport(
        report_id="rpt-001",
        requester_id="user-1",
        created_at=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
        summary="Mildly elevated liver enzymes with low platelets [DOC: 1].",
        key_findings=[
            "**Hepatic:** ALT 45 U/L (ref 7-40), mildly elevated [DOC: 1]",
            "**Hematologic:** Platelets 120 x10^3/uL (ref 150-400), low [DOC: 1]",
        ],
        clinical_correlations="Findings together warrant fibrosis evaluation.",
        recommendations=[
            "**Repeat labs:** Recheck ALT and CBC in 3 months",
            "**Hepatology referral:** If ALT remains elevated",
        ],
        uncertainties="No prior labs are available.",
        full_markdown=SAMPLE_MARKDOWN,
        provider_identifier="bedrock/test-model",
        document_names=["lab_panel.txt", "abdomen_ultrasound.txt"],
        key_values=[
            KeyValueRow(name="ALT", value="45", unit="U/L", reference_range="7-40"),
            KeyValueRow(name="Platelets", value="120", unit="x10^3/uL", reference_range="150-400"),
        ],
        questions_for_doctor=["Should I have an elastography scan?"],
    )
