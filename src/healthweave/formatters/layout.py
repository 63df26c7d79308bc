"""Page model, drawing operations and text flow.

Layout works in top-down points: ``y`` grows toward the bottom of the page.
:class:`PDFWriter` flips to reportlab's bottom-up coordinates at the end.
The cursor is an immutable value; every layout step returns a new one.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Union

from reportlab.lib.pagesizes import A4, LETTER
from reportlab.pdfbase.pdfmetrics import stringWidth

from healthweave.formatters.pdf_styles import BODY_COLOR, BODY_FONT, FOOTER_RESERVE

_PAGE_SIZES = {"letter": LETTER, "a4": A4}


# ── Drawing operations ──────────────────────────────────────────────


@dataclass(frozen=True)
class TextRun:
    """Text drawn with its baseline at ``y``."""

    x: float
    y: float
    text: str
    font: str
    size: float
    color: str


@dataclass(frozen=True)
class FilledRect:
    """Rectangle whose top-left corner is ``(x, y)``."""

    x: float
    y: float
    width: float
    height: float
    color: str


@dataclass(frozen=True)
class RuleLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float = 0.5


DrawOp = Union[TextRun, FilledRect, RuleLine]


@dataclass(frozen=True)
class RenderedPage:
    ops: tuple[DrawOp, ...]


@dataclass(frozen=True)
class RenderedDocument:
    page_width: float
    page_height: float
    pages: tuple[RenderedPage, ...]
    title: str = ""


# ── Geometry and cursor ─────────────────────────────────────────────


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    margin: float

    @classmethod
    def named(cls, page_size: str, margin: float) -> PageGeometry:
        width, height = _PAGE_SIZES[page_size]
        return cls(width=float(width), height=float(height), margin=margin)

    @property
    def left(self) -> float:
        return self.margin

    @property
    def top(self) -> float:
        return self.margin

    @property
    def bottom(self) -> float:
        """Lowest y content may reach; the footer lives below it."""
        return self.height - self.margin - FOOTER_RESERVE

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin


@dataclass(frozen=True)
class RenderCursor:
    """Where the next line starts, and the style it is drawn in."""

    page: int
    x: float
    y: float
    font: str = BODY_FONT
    size: float = 11.0
    color: str = BODY_COLOR

    def down(self, dy: float) -> RenderCursor:
        return replace(self, y=self.y + dy)

    def at(self, *, x: float | None = None, y: float | None = None) -> RenderCursor:
        return replace(self, x=self.x if x is None else x, y=self.y if y is None else y)

    def styled(
        self,
        *,
        font: str | None = None,
        size: float | None = None,
        color: str | None = None,
    ) -> RenderCursor:
        return replace(
            self,
            font=font or self.font,
            size=self.size if size is None else size,
            color=color or self.color,
        )


def new_page(cursor: RenderCursor, geometry: PageGeometry) -> RenderCursor:
    return replace(cursor, page=cursor.page + 1, x=geometry.left, y=geometry.top)


def ensure_space(cursor: RenderCursor, geometry: PageGeometry, needed: float) -> RenderCursor:
    """Start a new page when fewer than ``needed`` points remain."""
    if cursor.y + needed > geometry.bottom and cursor.y > geometry.top:
        return new_page(cursor, geometry)
    return cursor


class PageSink:
    """Collects drawing operations per page index.

    ``checkpoint``/``rollback`` let a caller discard everything drawn since a
    point, used when a markdown block fails halfway through.
    """

    def __init__(self) -> None:
        self._pages: list[list[DrawOp]] = [[]]

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def draw(self, page: int, op: DrawOp) -> None:
        while len(self._pages) <= page:
            self._pages.append([])
        self._pages[page].append(op)

    def touch(self, page: int) -> None:
        """Make sure ``page`` exists even if nothing is drawn on it yet."""
        while len(self._pages) <= page:
            self._pages.append([])

    def checkpoint(self) -> tuple[int, ...]:
        return tuple(len(ops) for ops in self._pages)

    def rollback(self, checkpoint: tuple[int, ...]) -> None:
        del self._pages[len(checkpoint):]
        for ops, keep in zip(self._pages, checkpoint):
            del ops[keep:]

    def finish(self, geometry: PageGeometry, title: str = "") -> RenderedDocument:
        return RenderedDocument(
            page_width=geometry.width,
            page_height=geometry.height,
            pages=tuple(RenderedPage(ops=tuple(ops)) for ops in self._pages),
            title=title,
        )


# ── Text measurement and wrapping ───────────────────────────────────


@dataclass(frozen=True)
class StyledRun:
    """A stretch of text in one font, size and color."""

    text: str
    font: str
    size: float
    color: str

    @property
    def width(self) -> float:
        return stringWidth(self.text, self.font, self.size)


Line = list[tuple[float, StyledRun]]

_TOKENS = re.compile(r"\n|[ \t]+|[^\s]+")


def _hard_split(run: StyledRun, width: float) -> list[StyledRun]:
    """Break a word wider than the line into chunks that fit."""
    chunks: list[StyledRun] = []
    current = ""
    for char in run.text:
        if current and stringWidth(current + char, run.font, run.size) > width:
            chunks.append(replace(run, text=current))
            current = char
        else:
            current += char
    if current:
        chunks.append(replace(run, text=current))
    return chunks


def _merge_line(line: Line) -> Line:
    while line and not line[-1][1].text.strip():
        line.pop()
    merged: Line = []
    for x, run in line:
        if merged:
            prev_x, prev = merged[-1]
            if (prev.font, prev.size, prev.color) == (run.font, run.size, run.color):
                merged[-1] = (prev_x, replace(prev, text=prev.text + run.text))
                continue
        merged.append((x, run))
    return merged


def wrap_runs(runs: Iterable[StyledRun], width: float) -> list[Line]:
    """Greedy word wrap across style changes.

    Each line is a list of ``(x_offset, run)``; a style change mid-line just
    starts a new run at the current offset. Whitespace collapses to one space
    and never starts a line. ``"\\n"`` forces a break.
    """
    lines: list[Line] = [[]]
    x = 0.0
    for run in runs:
        for token in _TOKENS.findall(run.text):
            if token == "\n":
                lines.append([])
                x = 0.0
                continue
            if token.isspace():
                if x > 0:
                    space = replace(run, text=" ")
                    lines[-1].append((x, space))
                    x += space.width
                continue
            piece = replace(run, text=token)
            piece_width = piece.width
            if x > 0 and x + piece_width > width:
                lines.append([])
                x = 0.0
            if piece_width > width:
                chunks = _hard_split(piece, width)
                for chunk in chunks[:-1]:
                    lines[-1].append((0.0, chunk))
                    lines.append([])
                piece = chunks[-1]
                piece_width = piece.width
                x = 0.0
            lines[-1].append((x, piece))
            x += piece_width
    wrapped = [_merge_line(line) for line in lines]
    while len(wrapped) > 1 and not wrapped[-1]:
        wrapped.pop()
    return wrapped


def wrap_text(text: str, font: str, size: float, width: float) -> list[str]:
    """Plain-string convenience over :func:`wrap_runs`."""
    lines = wrap_runs([StyledRun(text, font, size, BODY_COLOR)], width)
    return ["".join(run.text for _, run in line) for line in lines]


def text_height(runs: Sequence[StyledRun], width: float, line_height: float) -> float:
    return len(wrap_runs(runs, width)) * line_height


def flow_runs(
    sink: PageSink,
    cursor: RenderCursor,
    geometry: PageGeometry,
    runs: Sequence[StyledRun],
    *,
    left: float,
    width: float,
    line_height: float,
    allow_break: bool = True,
) -> RenderCursor:
    """Draw ``runs`` wrapped to ``width`` starting at ``cursor``.

    Breaks to a new page between lines when ``allow_break`` is set.
    """
    for line in wrap_runs(runs, width):
        if allow_break and cursor.y + line_height > geometry.bottom:
            cursor = new_page(cursor, geometry)
        draw_line(sink, cursor, line, left)
        cursor = cursor.down(line_height)
    return cursor.at(x=left)


def draw_line(sink: PageSink, cursor: RenderCursor, line: Line, left: float) -> None:
    """Draw one wrapped line with its top edge at ``cursor.y``."""
    sink.touch(cursor.page)
    ascent = max((run.size for _, run in line), default=cursor.size)
    baseline = cursor.y + ascent
    for offset, run in line:
        sink.draw(
            cursor.page,
            TextRun(
                x=left + offset,
                y=baseline,
                text=run.text,
                font=run.font,
                size=run.size,
                color=run.color,
            ),
        )
