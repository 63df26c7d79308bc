"""Split a section body into list items.

Strategies are pure functions tried in order; the first that yields any
items wins. The last one always returns something for non-blank input.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from healthweave.extraction.sections import extract_section
from healthweave.text import strip_markdown

ListStrategy = Callable[[str], list[str]]

_LIST_MARKER = re.compile(r"^[ \t]*(?:[-*•]|\d+[.)])[ \t]+")
_EMPHASIZED_ROW = re.compile(
    r"^[ \t]*(?:(?:[-*•]|\d+[.)])[ \t]+)?(\*\*[^*\n]+?(?::\*\*|\*\*[ \t]*:)[ \t]*\S.*)$"
)
_NUMBERED = re.compile(r"^\d+[.)][ \t]+(\S.*)$")
_BULLET = re.compile(r"^[-*•][ \t]+(\S.*)$")
_INDENTED_BULLET = re.compile(r"^[ \t]+[-*•][ \t]+(\S.*)$")
_HEADING_LIKE = re.compile(r"^(?:#{1,6}[ \t]|\*\*[^*]+\*\*:?[ \t]*$|[-=_*]{3,}[ \t]*$)")


def emphasized_rows(block: str) -> list[str]:
    """``**Label:** detail`` lines kept intact with their list marker removed.

    Indented lines under a row (sub-bullets, wrapped text) are appended to it.
    Yields nothing unless every top-level item is such a row, so a mixed list
    falls through to the marker strategies with no item dropped.
    """
    lines = block.splitlines()
    has_markers = any(_LIST_MARKER.match(line) and line[:1] not in (" ", "\t") for line in lines)
    rows: list[str] = []
    in_row = False
    for line in lines:
        match = _EMPHASIZED_ROW.match(line)
        if match:
            rows.append(match.group(1).strip())
            in_row = True
        elif in_row and line[:1] in (" ", "\t") and line.strip():
            rows[-1] = f"{rows[-1]} {_LIST_MARKER.sub('', line).strip()}"
        else:
            in_row = False
            if _is_unlabeled_item(line, has_markers):
                return []
    return rows


def _is_unlabeled_item(line: str, has_markers: bool) -> bool:
    stripped = line.strip()
    if not stripped or line[:1] in (" ", "\t") or _HEADING_LIKE.match(stripped):
        return False
    # Intro prose around a marked list is not an item.
    return not has_markers or _LIST_MARKER.match(line) is not None


def _matching_lines(pattern: re.Pattern[str]) -> ListStrategy:
    def strategy(block: str) -> list[str]:
        items = []
        for line in block.splitlines():
            match = pattern.match(line.rstrip())
            if match:
                items.append(match.group(1).strip())
        return items

    return strategy


numbered_lines = _matching_lines(_NUMBERED)
bullet_lines = _matching_lines(_BULLET)
indented_bullet_lines = _matching_lines(_INDENTED_BULLET)


def plain_lines(block: str) -> list[str]:
    """Last resort: one item per non-blank, non-heading line."""
    lines = [line.strip() for line in block.splitlines() if line.strip()]
    items = [line for line in lines if not _HEADING_LIKE.match(line)]
    if items:
        return items
    deformatted = [strip_markdown(line) for line in lines]
    return [line for line in deformatted if line] or lines


MARKER_STRATEGIES: tuple[ListStrategy, ...] = (
    emphasized_rows,
    numbered_lines,
    bullet_lines,
    indented_bullet_lines,
)

LIST_STRATEGIES: tuple[ListStrategy, ...] = (*MARKER_STRATEGIES, plain_lines)


def split_list(block: str, strategies: tuple[ListStrategy, ...] = LIST_STRATEGIES) -> list[str]:
    for strategy in strategies:
        items = strategy(block)
        if items:
            return items
    return []


def extract_list(text: str, *aliases: str) -> list[str]:
    """Items of the first section matching ``aliases``; ``[]`` if none."""
    body = extract_section(text, *aliases)
    if not body:
        return []
    return split_list(body)
