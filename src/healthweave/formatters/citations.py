"""Detect citation tags such as ``[PMID: 123]`` inside a text run."""

from __future__ import annotations

import re

CITATION_SOURCES = ("DOC", "PMID", "ClinVar", "OMIM", "Guideline", "Journal")

_CITATION = re.compile(
    r"\[(?:" + "|".join(CITATION_SOURCES) + r")\s*:\s*[^\]\n]+\]",
    re.IGNORECASE,
)


def split_citations(text: str) -> list[tuple[str, bool]]:
    """Split ``text`` into ``(segment, is_citation)`` pieces, in order.

    Concatenating the segments gives back ``text``; empty segments are dropped.
    """
    pieces: list[tuple[str, bool]] = []
    pos = 0
    for match in _CITATION.finditer(text):
        if match.start() > pos:
            pieces.append((text[pos:match.start()], False))
        pieces.append((match.group(0), True))
        pos = match.end()
    if pos < len(text):
        pieces.append((text[pos:], False))
    return pieces


def has_citation(text: str) -> bool:
    return _CITATION.search(text) is not None
