"""healthweave: clinical document synthesis with provider fallback and PDF reports.

Typical use::

    from healthweave import (
        AppSettings, SourceDocument, ParsedReport,
        AnalysisService, ReportParser, create_provider_chain,
        PDFFormatter,
    )
"""

from __future__ import annotations

from typing import Any

from healthweave.core.config import AppSettings
from healthweave.exceptions import (
    AllProvidersFailedError,
    HealthWeaveError,
    LocalModelUnreachableError,
    PersistenceError,
    ProviderError,
    ProviderRejectedError,
    ProviderTimeoutError,
    ReportNotFoundError,
)
from healthweave.extraction.report_parser import ReportParser
from healthweave.models import KeyValueRow, ModelInvocationResult, ParsedReport, SourceDocument
from healthweave.providers.chain import ProviderChain, ProviderDescriptor
from healthweave.providers.factory import create_provider_chain
from healthweave.services.analysis_service import AnalysisService
from healthweave.services.report_service import ReportService
from healthweave.services.report_store import ReportStore


def __getattr__(name: str) -> Any:
    # reportlab is only imported when PDF output is requested
    if name == "PDFFormatter":
        from healthweave.formatters.pdf_formatter import PDFFormatter

        return PDFFormatter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AppSettings",
    "SourceDocument",
    "ParsedReport",
    "KeyValueRow",
    "ModelInvocationResult",
    "ReportParser",
    "ProviderChain",
    "ProviderDescriptor",
    "create_provider_chain",
    "AnalysisService",
    "ReportService",
    "ReportStore",
    "PDFFormatter",
    "HealthWeaveError",
    "ProviderError",
    "ProviderRejectedError",
    "ProviderTimeoutError",
    "LocalModelUnreachableError",
    "AllProvidersFailedError",
    "ReportNotFoundError",
    "PersistenceError",
]
