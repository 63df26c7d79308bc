"""Lay out a :class:`ParsedReport` as pages of drawing operations.

Rendering is pure: the same report and settings always give the same
:class:`RenderedDocument`. Markdown that cannot be tokenized or laid out is
drawn again as plain text, so rendering never fails for content reasons.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

from healthweave.extraction.fallbacks import truncate_at_section_title
from healthweave.formatters import pdf_styles as styles
from healthweave.formatters.citations import split_citations
from healthweave.formatters.layout import (
    FilledRect,
    Line,
    PageGeometry,
    PageSink,
    RenderCursor,
    RenderedDocument,
    RuleLine,
    StyledRun,
    TextRun,
    draw_line,
    ensure_space,
    flow_runs,
    new_page,
    wrap_runs,
)
from healthweave.formatters.markdown_tokens import Block, InlineSpan, Spans, parse_inline, tokenize
from healthweave.sections import KEY_FINDINGS, KEY_VALUES, QUESTIONS_FOR_DOCTOR, RECOMMENDATIONS, UNCERTAINTIES
from healthweave.text import sanitize_text, strip_markdown

if TYPE_CHECKING:
    from healthweave.core.config import PDFFormattingConfig
    from healthweave.models import ParsedReport

log = logging.getLogger(__name__)

_FINDING_ROW = re.compile(r"\*\*([^*]+):\*\*\s*(.+)", re.DOTALL)


def parse_finding_row(finding: str) -> tuple[str, str]:
    """Split ``**Label:** detail`` into de-formatted ``(label, detail)``."""
    match = _FINDING_ROW.search(finding)
    if match:
        return strip_markdown(match.group(1)).strip(), strip_markdown(match.group(2)).strip()
    return strip_markdown(finding).strip(), ""


def spans_to_runs(
    spans: Sequence[InlineSpan],
    size: float,
    color: str,
    *,
    force_bold: bool = False,
) -> list[StyledRun]:
    """Map inline spans to styled runs, splitting out citation tags.

    Citations keep the span's face (bold stays bold) but draw smaller and muted.
    """
    runs: list[StyledRun] = []
    for span in spans:
        if span.code:
            font = styles.CODE_FONT
        else:
            font = styles.FONT_FACES[(span.bold or force_bold, span.italic)]
        span_color = styles.LINK_COLOR if span.link else color
        for segment, is_citation in split_citations(sanitize_text(span.text)):
            if is_citation:
                runs.append(
                    StyledRun(segment, font, size * styles.CITATION_SCALE, styles.CITATION_COLOR)
                )
            else:
                runs.append(StyledRun(segment, font, size, span_color))
    return runs


def text_runs(text: str, size: float, color: str, *, bold: bool = False) -> list[StyledRun]:
    return spans_to_runs((InlineSpan(text),), size, color, force_bold=bold)


class ReportRenderer:
    """Renders the structured report followed by the full-analysis appendix."""

    def __init__(self, config: PDFFormattingConfig) -> None:
        self._config = config
        self._geometry = PageGeometry.named(config.page_size, config.margin_points)

    @property
    def geometry(self) -> PageGeometry:
        return self._geometry

    def _line_height(self, size: float) -> float:
        return size * styles.LINE_SPACING

    # ── Entry point ──────────────────────────────────────────────────

    def render(self, report: ParsedReport) -> RenderedDocument:
        geo = self._geometry
        sink = PageSink()
        cursor = RenderCursor(page=0, x=geo.left, y=geo.top, size=self._config.body_font_size)

        cursor = self._title_block(sink, cursor, report)

        cursor = self._section_bar(sink, cursor, "AI Summary")
        cursor = self._markdown(sink, cursor, report.summary, self._config.body_font_size)

        if report.key_values:
            cursor = self._section_bar(sink, cursor, KEY_VALUES.title)
            cursor = self._key_values(sink, cursor, report)

        cursor = self._section_bar(sink, cursor, KEY_FINDINGS.title)
        cursor = self._key_findings(sink, cursor, report.key_findings)

        cursor = self._section_bar(sink, cursor, RECOMMENDATIONS.title)
        cursor = self._numbered(sink, cursor, report.recommendations)

        if report.uncertainties:
            cursor = self._section_bar(sink, cursor, UNCERTAINTIES.title)
            cursor = self._markdown(sink, cursor, report.uncertainties, self._config.body_font_size)

        cursor = self._section_bar(sink, cursor, QUESTIONS_FOR_DOCTOR.title)
        if report.questions_for_doctor:
            cursor = self._numbered(sink, cursor, report.questions_for_doctor)
        else:
            cursor = self._muted(sink, cursor, styles.NO_QUESTIONS)

        if self._config.include_appendix and report.full_markdown.strip():
            cursor = new_page(cursor, geo)
            cursor = self._section_bar(sink, cursor, styles.APPENDIX_TITLE)
            cursor = self._markdown(sink, cursor, report.full_markdown, self._config.markdown_font_size)

        self._disclaimer(sink, cursor)
        self._footers(sink)
        return sink.finish(geo, title=f"{self._config.brand_name} Report {report.report_id}")

    # ── Title and chrome ─────────────────────────────────────────────

    def _centered(self, sink: PageSink, cursor: RenderCursor, text: str, font: str, size: float, color: str) -> RenderCursor:
        geo = self._geometry
        for line in wrap_runs([StyledRun(sanitize_text(text), font, size, color)], geo.content_width):
            for _, run in line:
                x = geo.left + (geo.content_width - run.width) / 2
                sink.draw(cursor.page, TextRun(x, cursor.y + size, run.text, font, size, color))
            cursor = cursor.down(self._line_height(size))
        return cursor

    def _title_block(self, sink: PageSink, cursor: RenderCursor, report: ParsedReport) -> RenderCursor:
        geo = self._geometry
        cursor = self._centered(
            sink, cursor, self._config.brand_name, styles.BOLD_FONT, styles.TITLE_FONT_SIZE, styles.BODY_COLOR
        )
        cursor = self._centered(
            sink, cursor, styles.REPORT_SUBTITLE, styles.BODY_FONT, styles.SUBTITLE_FONT_SIZE, styles.LINK_COLOR
        )
        cursor = cursor.down(styles.PARAGRAPH_GAP)

        meta = [
            f"Report ID: {report.report_id}",
            f"Generated: {report.created_at.strftime('%Y-%m-%d %H:%M UTC')}",
            f"Model: {report.provider_identifier or 'unknown'}",
        ]
        if report.document_names:
            count = len(report.document_names)
            meta.append(f"Based on {count} document{'s' if count != 1 else ''}:")
            meta.extend(f"  • {name}" for name in report.document_names)

        size = styles.META_FONT_SIZE
        for line in meta:
            cursor = flow_runs(
                sink,
                cursor,
                geo,
                text_runs(line, size, styles.MUTED_COLOR),
                left=geo.left,
                width=geo.content_width,
                line_height=self._line_height(size),
            )
        return cursor.down(styles.SECTION_GAP)

    def _section_bar(self, sink: PageSink, cursor: RenderCursor, title: str) -> RenderCursor:
        """Filled header bar; never left alone at the bottom of a page."""
        geo = self._geometry
        cursor = ensure_space(cursor, geo, self._config.min_space_before_section)
        if cursor.y > styles.RULE_MIN_Y:
            sink.draw(
                cursor.page,
                RuleLine(geo.left, cursor.y, geo.left + geo.content_width, cursor.y, styles.RULE_COLOR),
            )
            cursor = cursor.down(styles.SECTION_GAP)

        size = self._config.section_title_font_size
        sink.draw(
            cursor.page,
            FilledRect(
                geo.left, cursor.y, geo.content_width, styles.SECTION_HEADER_HEIGHT, styles.SECTION_HEADER_BG
            ),
        )
        baseline = cursor.y + (styles.SECTION_HEADER_HEIGHT + size * 0.7) / 2
        sink.draw(
            cursor.page,
            TextRun(
                geo.left + styles.SECTION_HEADER_TEXT_INSET_X,
                baseline,
                sanitize_text(title),
                styles.BOLD_FONT,
                size,
                styles.SECTION_HEADER_TEXT,
            ),
        )
        return cursor.down(styles.SECTION_HEADER_HEIGHT + styles.SECTION_CONTENT_GAP)

    def _muted(self, sink: PageSink, cursor: RenderCursor, text: str) -> RenderCursor:
        geo = self._geometry
        size = self._config.body_font_size
        cursor = flow_runs(
            sink,
            cursor,
            geo,
            text_runs(text, size, styles.MUTED_COLOR),
            left=geo.left + styles.LIST_INDENT,
            width=geo.content_width - styles.LIST_INDENT,
            line_height=self._line_height(size),
        )
        return cursor.down(styles.SECTION_GAP)

    def _disclaimer(self, sink: PageSink, cursor: RenderCursor) -> None:
        size = styles.FOOTER_FONT_SIZE
        cursor = ensure_space(cursor, self._geometry, 3 * self._line_height(size))
        self._centered(sink, cursor, styles.DISCLAIMER, styles.BODY_FONT, size, styles.CITATION_COLOR)

    def _footers(self, sink: PageSink) -> None:
        geo = self._geometry
        size = styles.FOOTER_FONT_SIZE
        y = geo.height - geo.margin / 2
        total = sink.page_count
        for page in range(total):
            sink.draw(page, TextRun(geo.left, y, self._config.brand_name, styles.BODY_FONT, size, styles.MUTED_COLOR))
            label = StyledRun(f"Page {page + 1} of {total}", styles.BODY_FONT, size, styles.MUTED_COLOR)
            sink.draw(
                page,
                TextRun(geo.left + geo.content_width - label.width, y, label.text, label.font, size, label.color),
            )

    # ── Lists and tables ─────────────────────────────────────────────

    def _numbered(self, sink: PageSink, cursor: RenderCursor, items: Sequence[str]) -> RenderCursor:
        """Numbered items; a leading ``**Label:**`` is drawn bold mid-line."""
        geo = self._geometry
        size = self._config.body_font_size
        line_height = self._line_height(size)
        indent = styles.LIST_INDENT
        for index, item in enumerate(items, 1):
            cursor = ensure_space(cursor, geo, line_height * 2)
            sink.draw(
                cursor.page,
                TextRun(geo.left, cursor.y + size, f"{index}.", styles.BODY_FONT, size, styles.BODY_COLOR),
            )
            cursor = flow_runs(
                sink,
                cursor,
                geo,
                spans_to_runs(_inline(item), size, styles.BODY_COLOR),
                left=geo.left + indent,
                width=geo.content_width - indent,
                line_height=line_height,
            )
            cursor = cursor.down(styles.PARAGRAPH_GAP / 2)
        return cursor.down(styles.SECTION_GAP)

    def _key_findings(self, sink: PageSink, cursor: RenderCursor, findings: Sequence[str]) -> RenderCursor:
        rows = [parse_finding_row(item) for item in truncate_at_section_title(findings)]
        if not rows or (len(rows) == 1 and not rows[0][1]):
            text = rows[0][0] if rows else ""
            return self._muted(sink, cursor, text or "-")
        return self._table(sink, cursor, styles.FINDINGS_COLUMNS, [list(row) for row in rows])

    def _key_values(self, sink: PageSink, cursor: RenderCursor, report: ParsedReport) -> RenderCursor:
        rows = [[kv.name, kv.value, kv.unit, kv.reference_range] for kv in report.key_values]
        return self._table(sink, cursor, styles.KEY_VALUE_COLUMNS, rows)

    def _table(
        self,
        sink: PageSink,
        cursor: RenderCursor,
        columns: Sequence[tuple[str, float]],
        rows: Sequence[Sequence[str]],
        *,
        left: Optional[float] = None,
    ) -> RenderCursor:
        """Fixed-width columns; each row as tall as its tallest wrapped cell.

        The header row is repeated at the top of every page the table spans.
        """
        size = styles.TABLE_FONT_SIZE
        line_height = self._line_height(size)
        cells = [
            [text_runs(cell or styles.EMPTY_CELL, size, styles.BODY_COLOR) for cell in row] for row in rows
        ]
        return self._draw_table(sink, cursor, columns, cells, line_height, left)

    def _draw_table(
        self,
        sink: PageSink,
        cursor: RenderCursor,
        columns: Sequence[tuple[str, float]],
        cells: Sequence[Sequence[list[StyledRun]]],
        line_height: float,
        left: Optional[float],
    ) -> RenderCursor:
        geo = self._geometry
        x0 = geo.left if left is None else left
        size = styles.TABLE_FONT_SIZE
        header = [text_runs(title, size, styles.TABLE_HEADER_COLOR, bold=True) for title, _ in columns]

        padding = styles.TABLE_ROW_PADDING

        def wrap_row(row: Sequence[list[StyledRun]]) -> list[list[Line]]:
            return [wrap_runs(runs, width - padding) for runs, (_, width) in zip(row, columns)]

        def row_height(row: Sequence[list[Line]]) -> float:
            tallest = max((len(lines) for lines in row), default=0) * line_height
            return max(tallest, styles.TABLE_MIN_ROW_HEIGHT) + padding

        def draw_row(cursor: RenderCursor, row: Sequence[list[Line]], height: float) -> RenderCursor:
            x = x0
            for lines, (_, width) in zip(row, columns):
                line_cursor = cursor
                for line in lines:
                    draw_line(sink, line_cursor, line, x)
                    line_cursor = line_cursor.down(line_height)
                x += width
            bottom = cursor.y + height
            sink.draw(
                cursor.page,
                RuleLine(x0, bottom - padding / 2, x, bottom - padding / 2, styles.TABLE_RULE_COLOR),
            )
            return cursor.down(height)

        header_row = wrap_row(header)
        header_height = row_height(header_row)
        page_top = geo.top + header_height

        def continue_on_new_page(cursor: RenderCursor) -> RenderCursor:
            return draw_row(new_page(cursor, geo), header_row, header_height)

        cursor = ensure_space(cursor, geo, self._config.min_space_before_block)
        cursor = draw_row(cursor, header_row, header_height)
        for row in cells:
            pending = wrap_row(row)
            height = row_height(pending)
            fits_one_page = height <= geo.bottom - page_top
            if cursor.y + height > geo.bottom and cursor.y > page_top and fits_one_page:
                cursor = continue_on_new_page(cursor)
            # Rows taller than a page are split line by line; the header repeats.
            while cursor.y + height > geo.bottom:
                fit = int((geo.bottom - cursor.y - padding) // line_height)
                if fit < 1:
                    if cursor.y <= page_top:
                        break
                    cursor = continue_on_new_page(cursor)
                    continue
                head = [lines[:fit] for lines in pending]
                pending = [lines[fit:] for lines in pending]
                cursor = draw_row(cursor, head, row_height(head))
                cursor = continue_on_new_page(cursor)
                height = row_height(pending)
            cursor = draw_row(cursor, pending, height)
        return cursor.down(styles.SECTION_GAP)

    # ── Markdown ─────────────────────────────────────────────────────

    def _markdown(self, sink: PageSink, cursor: RenderCursor, markdown: str, size: float) -> RenderCursor:
        """Render markdown, falling back to de-formatted plain text on any error."""
        checkpoint = sink.checkpoint()
        start = cursor
        try:
            for block in tokenize(markdown):
                cursor = self._block(sink, cursor, block, size)
            return cursor.down(styles.SECTION_GAP)
        except Exception:
            log.warning("Markdown rendering failed; drawing plain text instead", exc_info=True)
            sink.rollback(checkpoint)
            return self._plain(sink, start, markdown, size)

    def _plain(self, sink: PageSink, cursor: RenderCursor, markdown: str, size: float) -> RenderCursor:
        geo = self._geometry
        line_height = self._line_height(size)
        for paragraph in re.split(r"\n\s*\n", strip_markdown(markdown)):
            if not paragraph.strip():
                continue
            cursor = flow_runs(
                sink,
                cursor,
                geo,
                text_runs(paragraph.strip(), size, styles.BODY_COLOR),
                left=geo.left,
                width=geo.content_width,
                line_height=line_height,
            )
            cursor = cursor.down(styles.PARAGRAPH_GAP)
        return cursor.down(styles.SECTION_GAP)

    def _block(self, sink: PageSink, cursor: RenderCursor, block: Block, size: float) -> RenderCursor:
        geo = self._geometry
        cursor = ensure_space(cursor, geo, self._config.min_space_before_block)
        quote_left = geo.left + block.quote_depth * styles.QUOTE_INDENT
        width = geo.content_width - (quote_left - geo.left)
        line_height = self._line_height(size)
        start = cursor

        if block.kind == "heading":
            heading_size = size * styles.HEADING_SCALE.get(block.level, 1.0)
            cursor = cursor.down(styles.PARAGRAPH_GAP)
            cursor = flow_runs(
                sink,
                cursor,
                geo,
                spans_to_runs(block.spans, heading_size, styles.BODY_COLOR, force_bold=True),
                left=quote_left,
                width=width,
                line_height=self._line_height(heading_size),
            )
        elif block.kind == "list_item":
            indent = styles.LIST_INDENT * block.level
            if block.marker:
                sink.draw(
                    cursor.page,
                    TextRun(
                        quote_left + indent - styles.LIST_INDENT,
                        cursor.y + size,
                        block.marker,
                        styles.BODY_FONT,
                        size,
                        styles.BODY_COLOR,
                    ),
                )
            cursor = flow_runs(
                sink,
                cursor,
                geo,
                spans_to_runs(block.spans, size, styles.BODY_COLOR),
                left=quote_left + indent,
                width=width - indent,
                line_height=line_height,
            )
        elif block.kind == "code":
            cursor = self._code(sink, cursor, block, quote_left, width, size)
        elif block.kind == "hr":
            sink.draw(cursor.page, RuleLine(quote_left, cursor.y, quote_left + width, cursor.y, styles.RULE_COLOR))
        elif block.kind == "table":
            cursor = self._markdown_table(sink, cursor, block, quote_left, width)
        else:
            cursor = flow_runs(
                sink,
                cursor,
                geo,
                spans_to_runs(block.spans, size, styles.BODY_COLOR),
                left=quote_left,
                width=width,
                line_height=line_height,
            )

        if block.quote_depth and cursor.page == start.page:
            bar_x = quote_left - styles.QUOTE_INDENT / 2
            sink.draw(cursor.page, RuleLine(bar_x, start.y, bar_x, cursor.y, styles.QUOTE_BAR_COLOR, 2.0))
        return cursor.down(styles.PARAGRAPH_GAP)

    def _code(
        self, sink: PageSink, cursor: RenderCursor, block: Block, left: float, width: float, size: float
    ) -> RenderCursor:
        geo = self._geometry
        code_size = size - 1
        line_height = self._line_height(code_size)
        indent = styles.LIST_INDENT * block.level
        for raw_line in block.code.splitlines() or [""]:
            line = sanitize_text(raw_line.replace("\t", "    ")) or " "
            chunks = wrap_runs([StyledRun(line, styles.CODE_FONT, code_size, styles.BODY_COLOR)], width - indent)
            for chunk in chunks:
                if cursor.y + line_height > geo.bottom:
                    cursor = new_page(cursor, geo)
                sink.draw(
                    cursor.page,
                    FilledRect(left + indent, cursor.y, width - indent, line_height, styles.CODE_BG_COLOR),
                )
                for offset, run in chunk:
                    sink.draw(
                        cursor.page,
                        TextRun(left + indent + offset, cursor.y + code_size, run.text, run.font, code_size, run.color),
                    )
                cursor = cursor.down(line_height)
        return cursor

    def _markdown_table(
        self, sink: PageSink, cursor: RenderCursor, block: Block, left: float, width: float
    ) -> RenderCursor:
        count = max([len(block.header)] + [len(row) for row in block.rows])
        if count == 0:
            return cursor
        column_width = width / count
        titles = [_plain_spans(cell) for cell in block.header] + [""] * (count - len(block.header))
        columns = [(title, column_width) for title in titles]
        size = styles.TABLE_FONT_SIZE
        cells = [
            [spans_to_runs(cell, size, styles.BODY_COLOR) for cell in row] + [[]] * (count - len(row))
            for row in block.rows
        ]
        return self._draw_table(sink, cursor, columns, cells, self._line_height(size), left)


def _plain_spans(spans: Spans) -> str:
    return "".join(span.text for span in spans)


def _inline(text: str) -> Spans:
    try:
        spans = parse_inline(text)
    except Exception:
        log.warning("Inline markdown failed; drawing item as plain text", exc_info=True)
        spans = ()
    return spans or (InlineSpan(strip_markdown(text)),)
