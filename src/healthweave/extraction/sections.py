"""Locate a named section in free-form model markdown.

Three header styles are tried in order: a markdown heading, an emphasized
``**Label:**`` line, then a plain ``Label:`` line. For each style every alias
is tried in the order given; the first hit wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from functools import lru_cache
from typing import Optional

from healthweave.sections import section_titles_lower

# A style takes (text, alias) and returns the captured body or None.
SectionStyle = Callable[[str, str], Optional[str]]

_ANY_HEADING = re.compile(r"^[ \t]{0,3}#{1,6}[ \t]", re.MULTILINE)
_EMPHASIZED_LINE = re.compile(r"^[ \t]*\*\*", re.MULTILINE)


@lru_cache(maxsize=256)
def _heading_pattern(alias: str) -> re.Pattern[str]:
    return re.compile(
        r"^[ \t]{0,3}#{1,6}[ \t]*(?:\d+[.)][ \t]*)?(?:\*\*)?"
        + re.escape(alias)
        + r"(?!\w)[^\n]*$",
        re.MULTILINE | re.IGNORECASE,
    )


@lru_cache(maxsize=256)
def _emphasized_pattern(alias: str) -> re.Pattern[str]:
    # **Alias:** or **Alias**:
    return re.compile(
        r"^[ \t]*\*\*" + re.escape(alias) + r"[ \t]*(?::\*\*|\*\*[ \t]*:)[ \t]*",
        re.MULTILINE | re.IGNORECASE,
    )


@lru_cache(maxsize=256)
def _plain_pattern(alias: str) -> re.Pattern[str]:
    return re.compile(r"^[ \t]*" + re.escape(alias) + r"[ \t]*:[ \t]*", re.MULTILINE | re.IGNORECASE)


def _next_boundary(text: str, start: int, *patterns: re.Pattern[str]) -> int:
    end = len(text)
    for pattern in patterns:
        found = pattern.search(text, start)
        if found and found.start() < end:
            end = found.start()
    return end


def heading_style(text: str, alias: str) -> Optional[str]:
    """``## Alias`` up to the next heading of any level or end of text."""
    match = _heading_pattern(alias).search(text)
    if match is None:
        return None
    end = _next_boundary(text, match.end(), _ANY_HEADING)
    return text[match.end():end].strip()


def emphasized_label_style(text: str, alias: str) -> Optional[str]:
    """``**Alias:** body`` up to the next emphasized line or heading."""
    match = _emphasized_pattern(alias).search(text)
    if match is None:
        return None
    end = _next_boundary(text, match.end(), _EMPHASIZED_LINE, _ANY_HEADING)
    return text[match.end():end].strip()


def _plain_label_boundary() -> re.Pattern[str]:
    titles = sorted(section_titles_lower(), key=len, reverse=True)
    return re.compile(
        r"^[ \t]*(?:" + "|".join(re.escape(t) for t in titles) + r")[ \t]*:",
        re.MULTILINE | re.IGNORECASE,
    )


_PLAIN_LABEL_BOUNDARY = _plain_label_boundary()


def plain_label_style(text: str, alias: str) -> Optional[str]:
    """``Alias: body`` up to the next known section label, emphasized line or heading."""
    match = _plain_pattern(alias).search(text)
    if match is None:
        return None
    end = _next_boundary(text, match.end(), _PLAIN_LABEL_BOUNDARY, _EMPHASIZED_LINE, _ANY_HEADING)
    return text[match.end():end].strip()


SECTION_STYLES: tuple[SectionStyle, ...] = (
    heading_style,
    emphasized_label_style,
    plain_label_style,
)


def extract_section(text: str, *aliases: str) -> Optional[str]:
    """Return the trimmed body of the first matching section, or ``None``.

    A matched header with nothing under it returns ``""``.
    """
    if not text or not aliases:
        return None
    for style in SECTION_STYLES:
        for alias in aliases:
            body = style(text, alias)
            if body is not None:
                return body
    return None
