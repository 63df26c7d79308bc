"""PDF output formatter: :class:`ReportRenderer` followed by :class:`PDFWriter`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from healthweave.core.config import PDFFormattingConfig
from healthweave.formatters.pdf_writer import PDFWriter
from healthweave.formatters.report_renderer import ReportRenderer
from healthweave.models import ParsedReport

log = logging.getLogger(__name__)


class PDFFormatter:
    """Renders a :class:`ParsedReport` as a paginated PDF.

    Output is byte-for-byte deterministic for a given report and config.
    """

    def __init__(self, config: Optional[PDFFormattingConfig] = None) -> None:
        self._config = config or PDFFormattingConfig()
        self._renderer = ReportRenderer(self._config)
        self._writer = PDFWriter(author=self._config.brand_name)

    def format(self, report: ParsedReport, **kwargs: Any) -> bytes:
        document = self._renderer.render(report)
        data = self._writer.write(document)
        log.info(
            "Rendered report %s: %d page(s), %d bytes",
            report.report_id,
            len(document.pages),
            len(data),
        )
        return data

    def format_to_file(self, report: ParsedReport, path: Path, **kwargs: Any) -> Path:
        path.write_bytes(self.format(report, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return "application/pdf"
