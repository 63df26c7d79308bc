"""Plain-text helpers shared by extraction and rendering."""

from __future__ import annotations

import html
import re

# ── Unicode sanitization ────────────────────────────────────────────
# Helvetica lacks glyphs for many characters models emit; map them to ASCII.

_UNICODE_REPLACEMENTS: dict[str, str] = {
    # Dashes / hyphens
    "‑": "-",       # non-breaking hyphen
    "‐": "-",       # hyphen
    "‒": "-",       # figure dash
    "–": "-",       # en-dash
    "—": "-",       # em-dash
    "―": "-",       # horizontal bar
    "−": "-",       # minus sign
    # Spaces
    " ": " ",       # narrow no-break space
    " ": " ",       # non-breaking space
    " ": " ",       # thin space
    " ": " ",       # hair space
    "​": "",        # zero-width space
    # Quotes
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    # Punctuation and symbols
    "…": "...",     # ellipsis
    "•": "-",       # bullet
    "·": ".",       # middle dot
    "≤": "<=",
    "≥": ">=",
    "±": "+/-",
    "≈": "~",
    # Superscript digits
    "²": "2",
    "³": "3",
    "¹": "1",
    "⁰": "0",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    # Scientific symbols
    "µ": "u",       # micro sign, as in uL
    "μ": "u",       # greek mu
    "×": "x",       # multiplication sign
    "→": "->",
    "↑": "^",       # "elevated"
    "↓": "v",       # "decreased"
}

# Residue of a broken encoding pass seen in model output, e.g. "/;AB'à".
_GARBLED_SEQUENCE = re.compile(r"/;[A-Z]+'[àáâãä]")


def sanitize_text(text: str) -> str:
    """Decode HTML entities, drop garbled sequences, map glyphs to ASCII."""
    text = _GARBLED_SEQUENCE.sub("", text)
    text = html.unescape(text)
    for char, replacement in _UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


# ── Markdown de-formatting ──────────────────────────────────────────

_MARKDOWN_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^#{1,6}\s*", re.MULTILINE), ""),
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"__(.+?)__"), r"\1"),
    (re.compile(r"(?<!\w)_(.+?)_(?!\w)"), r"\1"),
    (re.compile(r"\*(.+?)\*"), r"\1"),
    (re.compile(r"`([^`]*)`"), r"\1"),
    (re.compile(r"!?\[([^\]]+)\]\([^)]*\)"), r"\1"),
    (re.compile(r"\*"), ""),
)


def strip_markdown(text: str) -> str:
    """Remove emphasis, code spans, links and heading markers; keep the words."""
    for pattern, replacement in _MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()
