"""Serialize a :class:`RenderedDocument` to PDF bytes with reportlab."""

from __future__ import annotations

from io import BytesIO

try:
    from reportlab.lib.colors import HexColor
    from reportlab.pdfgen import canvas
except ImportError as _exc:
    raise ImportError(
        "reportlab is required for PDF output. Install with: pip install healthweave"
    ) from _exc

from healthweave.formatters.layout import FilledRect, RenderedDocument, RuleLine, TextRun


def _hex(color_str: str) -> HexColor:
    return HexColor(color_str)


class PDFWriter:
    """Draws each operation with ``reportlab.pdfgen.canvas``.

    ``invariant=1`` pins the creation date and document id so identical
    documents produce identical bytes.
    """

    def __init__(self, author: str = "HealthWeave") -> None:
        self._author = author

    def write(self, document: RenderedDocument) -> bytes:
        buf = BytesIO()
        height = document.page_height
        pdf = canvas.Canvas(
            buf,
            pagesize=(document.page_width, height),
            invariant=1,
            pageCompression=1,
        )
        pdf.setAuthor(self._author)
        if document.title:
            pdf.setTitle(document.title)

        for page in document.pages:
            for op in page.ops:
                if isinstance(op, TextRun):
                    pdf.setFont(op.font, op.size)
                    pdf.setFillColor(_hex(op.color))
                    pdf.drawString(op.x, height - op.y, op.text)
                elif isinstance(op, FilledRect):
                    pdf.setFillColor(_hex(op.color))
                    pdf.rect(op.x, height - op.y - op.height, op.width, op.height, stroke=0, fill=1)
                elif isinstance(op, RuleLine):
                    pdf.setStrokeColor(_hex(op.color))
                    pdf.setLineWidth(op.width)
                    pdf.line(op.x1, height - op.y1, op.x2, height - op.y2)
            pdf.showPage()

        pdf.save()
        return buf.getvalue()
