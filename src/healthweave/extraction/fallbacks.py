"""Whole-text heuristics used when a named section yields nothing."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Optional

from healthweave.extraction.lists import MARKER_STRATEGIES, split_list
from healthweave.sections import section_titles_lower
from healthweave.text import strip_markdown

_LIST_ITEM = re.compile(r"^[ \t]*(?:[-*•]|\d+[.)])[ \t]+(\S.*)$")
_TOP_LEVEL_ITEM = re.compile(r"^(?:[-*•]|\d+[.)])[ \t]+(\S.*)$")
_ANY_HEADING = re.compile(r"^[ \t]{0,3}#{1,6}[ \t]", re.MULTILINE)
_RECOMMEND_HEADER = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]*(?:\d+[.)][ \t]*)?|\*\*)?[ \t]*recommend[^\n]*$",
    re.MULTILINE | re.IGNORECASE,
)
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")
_RECOMMENDATION_VERBS = re.compile(
    r"\b(?:consider\w*|recommend\w*|follow[- ]?up|repeat\w*|refer\w*|schedul\w*|monitor\w*)\b",
    re.IGNORECASE,
)


def first_list_block(text: str, max_items: int = 10) -> list[str]:
    """Items of the first run of numbered or bulleted lines anywhere in ``text``.

    Blank lines and nested items do not end the run; the first prose line or
    heading after it does. Only top-level items are returned.
    """
    items: list[str] = []
    started = False
    for line in text.splitlines():
        if not line.strip():
            continue
        top = _TOP_LEVEL_ITEM.match(line)
        if top:
            started = True
            items.append(top.group(1).strip())
        elif started and _LIST_ITEM.match(line):
            continue
        elif started:
            break
    return items[:max_items]


def recommendation_block(text: str, max_items: int = 10) -> list[str]:
    """List lines under any header or label starting with "Recommend"."""
    for match in _RECOMMEND_HEADER.finditer(text):
        end = _ANY_HEADING.search(text, match.end())
        block = text[match.end(): end.start() if end else len(text)]
        items = split_list(block, MARKER_STRATEGIES)
        if items:
            return items[:max_items]
    return []


def recommendation_sentences(text: str, max_items: int = 10) -> list[str]:
    """Sentences that start with or contain a recommendation verb."""
    found: list[str] = []
    for line in text.splitlines():
        line = strip_markdown(_LIST_ITEM.sub(r"\1", line))
        if not line:
            continue
        for sentence in _SENTENCE_END.split(line):
            sentence = sentence.strip()
            if sentence and _RECOMMENDATION_VERBS.search(sentence) and sentence not in found:
                found.append(sentence)
                if len(found) >= max_items:
                    return found
    return found


def first_paragraph(text: str) -> Optional[str]:
    """First block of prose that is not a heading, list, table or rule."""
    for block in re.split(r"\n[ \t]*\n", text):
        lines = [line for line in block.strip().splitlines() if line.strip()]
        prose = [
            line
            for line in lines
            if not _ANY_HEADING.match(line)
            and not _LIST_ITEM.match(line)
            and not line.lstrip().startswith("|")
            and not re.match(r"^[ \t]*[-=_*]{3,}[ \t]*$", line)
        ]
        if prose:
            return " ".join(line.strip() for line in prose)
    return None


def truncate_at_section_title(items: Sequence[str]) -> list[str]:
    """Cut the list where an item is itself another section's title."""
    titles = section_titles_lower()
    kept: list[str] = []
    for item in items:
        if strip_markdown(item).rstrip(":").strip().lower() in titles:
            break
        kept.append(item)
    return kept
