"""Output formatter protocol shared by the PDF and JSON formatters."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from healthweave.models import ParsedReport


@runtime_checkable
class IOutputFormatter(Protocol):
    """Renders a :class:`ParsedReport` to bytes of one content type."""

    def format(self, report: ParsedReport, **kwargs: Any) -> bytes:
        ...

    def format_to_file(self, report: ParsedReport, path: Path, **kwargs: Any) -> Path:
        """Render and write to a file. Returns the output path."""
        ...

    @property
    def content_type(self) -> str:
        """MIME type, e.g. ``application/pdf``."""
        ...
