"""Output formatters for rendering a ParsedReport.

Usage::

    from healthweave.formatters import PDFFormatter, JSONFormatter

    pdf_bytes = PDFFormatter().format(report)
    json_bytes = JSONFormatter().format(report)
"""

from __future__ import annotations

from typing import Any

from healthweave.formatters.json_formatter import JSONFormatter
from healthweave.formatters.protocols import IOutputFormatter

__all__ = [
    "IOutputFormatter",
    "JSONFormatter",
    "PDFFormatter",
]


def __getattr__(name: str) -> Any:
    """Lazy-load PDFFormatter so reportlab is only imported when needed."""
    if name == "PDFFormatter":
        from healthweave.formatters.pdf_formatter import PDFFormatter

        return PDFFormatter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
