"""Centralized style constants for PDF output formatting."""

from __future__ import annotations

# ── Colors (hex strings) ─────────────────────────────────────────────
# Plain hex so layout stays independent of reportlab; the writer converts.

SECTION_HEADER_BG = "#29628B"
SECTION_HEADER_TEXT = "#FFFFFF"
BODY_COLOR = "#2D343F"
MUTED_COLOR = "#666666"
CITATION_COLOR = "#888888"
LINK_COLOR = "#4693C3"
RULE_COLOR = "#E5E7EB"
TABLE_HEADER_COLOR = "#29628B"
TABLE_RULE_COLOR = "#CBD5E1"
CODE_BG_COLOR = "#F3F4F6"
QUOTE_BAR_COLOR = "#CBD5E1"

# ── Fonts ────────────────────────────────────────────────────────────
# Standard Type 1 faces; (bold, italic) -> face name.

FONT_FACES: dict[tuple[bool, bool], str] = {
    (False, False): "Helvetica",
    (True, False): "Helvetica-Bold",
    (False, True): "Helvetica-Oblique",
    (True, True): "Helvetica-BoldOblique",
}
CODE_FONT = "Courier"
BODY_FONT = FONT_FACES[(False, False)]
BOLD_FONT = FONT_FACES[(True, False)]

TITLE_FONT_SIZE = 24.0
SUBTITLE_FONT_SIZE = 12.0
META_FONT_SIZE = 9.0
TABLE_FONT_SIZE = 10.0
FOOTER_FONT_SIZE = 8.0
# Citations draw at this fraction of the surrounding size.
CITATION_SCALE = 0.8
HEADING_SCALE: dict[int, float] = {1: 1.5, 2: 1.3, 3: 1.15, 4: 1.05, 5: 1.0, 6: 1.0}
LINE_SPACING = 1.35

# ── Layout constants ─────────────────────────────────────────────────

SECTION_HEADER_HEIGHT = 28.0
SECTION_HEADER_TEXT_INSET_X = 12.0
SECTION_HEADER_TEXT_INSET_Y = 8.0
SECTION_CONTENT_GAP = 12.0
SECTION_GAP = 14.0
PARAGRAPH_GAP = 6.0
LIST_INDENT = 18.0
QUOTE_INDENT = 14.0
# Rule drawn above a section bar unless it sits at the top of the page.
RULE_MIN_Y = 80.0
FOOTER_RESERVE = 24.0

# ── Tables ───────────────────────────────────────────────────────────

KEY_VALUE_COLUMNS: tuple[tuple[str, float], ...] = (
    ("Test", 200.0),
    ("Value", 85.0),
    ("Unit", 65.0),
    ("Reference", 145.0),
)
FINDINGS_COLUMNS: tuple[tuple[str, float], ...] = (
    ("Finding", 160.0),
    ("Details", 335.0),
)
TABLE_ROW_PADDING = 6.0
TABLE_MIN_ROW_HEIGHT = 12.0
EMPTY_CELL = "-"

# ── Text ─────────────────────────────────────────────────────────────

REPORT_SUBTITLE = "Health Data Synthesis Report"
APPENDIX_TITLE = "Appendix: Full Analysis"
DISCLAIMER = (
    "This report is for informational purposes only and should be reviewed by a "
    "qualified healthcare provider."
)
NO_QUESTIONS = "None generated."
