"""Markdown to a flat block sequence with styled inline spans.

markdown-it-py produces the token stream; this module folds it into
:class:`Block` values the renderer can lay out without knowing about
markdown-it. Nested lists and blockquotes are flattened with depth counters.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from markdown_it import MarkdownIt

_PARSER: MarkdownIt | None = None


def _markdown_parser() -> MarkdownIt:
    global _PARSER
    if _PARSER is None:
        _PARSER = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])
    return _PARSER


@dataclass(frozen=True)
class InlineSpan:
    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    link: Optional[str] = None

    def same_style(self, other: InlineSpan) -> bool:
        return (self.bold, self.italic, self.code, self.link) == (
            other.bold,
            other.italic,
            other.code,
            other.link,
        )


Spans = tuple[InlineSpan, ...]


@dataclass(frozen=True)
class Block:
    """One laid-out unit.

    ``kind`` is one of ``heading``, ``paragraph``, ``list_item``, ``code``,
    ``hr`` or ``table``. ``level`` is the heading level or list depth;
    ``marker`` is the bullet or ordinal drawn before a list item's first
    paragraph.
    """

    kind: str
    spans: Spans = ()
    level: int = 0
    marker: str = ""
    quote_depth: int = 0
    code: str = ""
    header: tuple[Spans, ...] = ()
    rows: tuple[tuple[Spans, ...], ...] = field(default_factory=tuple)

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.spans)


def merge_spans(spans: list[InlineSpan]) -> Spans:
    """Join neighbours with identical style so citation tags are never split."""
    merged: list[InlineSpan] = []
    for span in spans:
        if not span.text:
            continue
        if merged and merged[-1].same_style(span):
            merged[-1] = replace(merged[-1], text=merged[-1].text + span.text)
        else:
            merged.append(span)
    return tuple(merged)


def inline_spans(children: list[Any] | None) -> Spans:
    if not children:
        return ()
    spans: list[InlineSpan] = []
    strong_depth = 0
    italic_depth = 0
    links: list[str] = []

    def styled(text: str, code: bool = False) -> InlineSpan:
        return InlineSpan(
            text=text,
            bold=strong_depth > 0,
            italic=italic_depth > 0,
            code=code,
            link=links[-1] if links else None,
        )

    for token in children:
        kind = token.type
        if kind == "text":
            spans.append(styled(token.content))
        elif kind == "softbreak":
            spans.append(styled(" "))
        elif kind == "hardbreak":
            spans.append(styled("\n"))
        elif kind == "code_inline":
            spans.append(styled(token.content, code=True))
        elif kind == "strong_open":
            strong_depth += 1
        elif kind == "strong_close":
            strong_depth = max(0, strong_depth - 1)
        elif kind == "em_open":
            italic_depth += 1
        elif kind == "em_close":
            italic_depth = max(0, italic_depth - 1)
        elif kind == "link_open":
            links.append(str(token.attrGet("href") or ""))
        elif kind == "link_close":
            if links:
                links.pop()
        elif kind == "image":
            spans.append(styled(f"[Image: {token.content or 'image'}]"))
        elif token.content:
            spans.append(styled(token.content))
    return merge_spans(spans)


def tokenize(markdown: str) -> tuple[Block, ...]:
    """Parse ``markdown`` into blocks. Raises whatever markdown-it raises."""
    tokens = _markdown_parser().parse(markdown or "")
    blocks: list[Block] = []

    # [ordered, next_ordinal] per open list
    list_stack: list[list[Any]] = []
    pending_marker: Optional[str] = None
    quote_depth = 0
    heading_level = 0
    table_header: list[Spans] = []
    table_rows: list[tuple[Spans, ...]] = []
    current_row: list[Spans] = []
    in_thead = False
    in_table = False

    for token in tokens:
        kind = token.type
        if kind in ("bullet_list_open", "ordered_list_open"):
            start = int(token.attrGet("start") or 1) if kind == "ordered_list_open" else 1
            list_stack.append([kind == "ordered_list_open", start])
        elif kind in ("bullet_list_close", "ordered_list_close"):
            if list_stack:
                list_stack.pop()
        elif kind == "list_item_open":
            if list_stack and list_stack[-1][0]:
                pending_marker = f"{list_stack[-1][1]}."
                list_stack[-1][1] += 1
            else:
                pending_marker = "•"
        elif kind == "blockquote_open":
            quote_depth += 1
        elif kind == "blockquote_close":
            quote_depth = max(0, quote_depth - 1)
        elif kind == "heading_open":
            heading_level = int(token.tag[1:]) if token.tag[1:].isdigit() else 1
        elif kind == "heading_close":
            heading_level = 0
        elif kind == "table_open":
            in_table = True
            table_header, table_rows = [], []
        elif kind == "thead_open":
            in_thead = True
        elif kind == "thead_close":
            in_thead = False
        elif kind == "tr_open":
            current_row = []
        elif kind == "tr_close":
            if in_thead:
                table_header = list(current_row)
            else:
                table_rows.append(tuple(current_row))
        elif kind == "table_close":
            in_table = False
            blocks.append(
                Block(
                    kind="table",
                    quote_depth=quote_depth,
                    header=tuple(table_header),
                    rows=tuple(table_rows),
                )
            )
        elif kind == "inline":
            spans = inline_spans(token.children)
            if in_table:
                current_row.append(spans)
            elif heading_level:
                blocks.append(
                    Block(kind="heading", spans=spans, level=heading_level, quote_depth=quote_depth)
                )
            elif list_stack:
                blocks.append(
                    Block(
                        kind="list_item",
                        spans=spans,
                        level=len(list_stack),
                        marker=pending_marker or "",
                        quote_depth=quote_depth,
                    )
                )
                pending_marker = None
            else:
                blocks.append(Block(kind="paragraph", spans=spans, quote_depth=quote_depth))
        elif kind in ("fence", "code_block"):
            blocks.append(
                Block(
                    kind="code",
                    code=token.content.rstrip("\n"),
                    level=len(list_stack),
                    quote_depth=quote_depth,
                )
            )
        elif kind == "hr":
            blocks.append(Block(kind="hr", quote_depth=quote_depth))
        elif kind == "html_block" and token.content.strip():
            blocks.append(
                Block(kind="paragraph", spans=(InlineSpan(token.content.strip()),), quote_depth=quote_depth)
            )
    return tuple(blocks)


def parse_inline(text: str) -> Spans:
    """Inline spans of a single line of markdown, such as one list item."""
    tokens = _markdown_parser().parseInline(text or "")
    return inline_spans(tokens[0].children if tokens else None)
