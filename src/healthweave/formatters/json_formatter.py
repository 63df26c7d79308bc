"""JSON output formatter for API responses and the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from healthweave.models import ParsedReport


class JSONFormatter:
    """Renders a report as indented JSON bytes."""

    def format(self, report: ParsedReport, **kwargs: Any) -> bytes:
        return report.model_dump_json(indent=2).encode("utf-8")

    def format_to_file(self, report: ParsedReport, path: Path, **kwargs: Any) -> Path:
        path.write_bytes(self.format(report, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return "application/json"
