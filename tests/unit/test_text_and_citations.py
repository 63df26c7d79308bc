"""Tests for text sanitization, markdown stripping and citation splitting."""

from __future__ import annotations

from healthweave.formatters.citations import has_citation, split_citations
from healthweave.text import sanitize_text, strip_markdown


class TestSanitizeText:
    def test_unicode_mapped_to_ascii(self):
        assert sanitize_text("ALT ≥ 40 – high, 5 µL") == "ALT >= 40 - high, 5 uL"

    def test_html_entities_decoded(self):
        assert sanitize_text("AST &amp; ALT &lt; 40") == "AST & ALT < 40"

    def test_garbled_sequences_removed(self):
        assert sanitize_text("value/;AB'à 12") == "value 12"

    def test_plain_ascii_unchanged(self):
        assert sanitize_text("Platelets 120 (150-400)") == "Platelets 120 (150-400)"


class TestStripMarkdown:
    def test_inline_markup_removed(self):
        assert strip_markdown("**Bold** and *it* `code` [link](http://x)") == "Bold and it code link"

    def test_heading_markers_removed(self):
        assert strip_markdown("## Key Findings") == "Key Findings"

    def test_snake_case_preserved(self):
        assert strip_markdown("see lab_panel_2024") == "see lab_panel_2024"


class TestCitations:
    def test_split_preserves_order_and_text(self):
        text = "ALT high [DOC: 1] and [PMID: 123]."
        pieces = split_citations(text)
        assert pieces == [
            ("ALT high ", False),
            ("[DOC: 1]", True),
            (" and ", False),
            ("[PMID: 123]", True),
            (".", False),
        ]
        assert "".join(segment for segment, _ in pieces) == text

    def test_all_sources_recognized(self):
        for tag in ("[ClinVar: VCV0001]", "[OMIM: 600001]", "[Guideline: AASLD 2023]", "[Journal: NEJM 2020]"):
            assert has_citation(tag)

    def test_case_insensitive(self):
        assert split_citations("[doc: 2]") == [("[doc: 2]", True)]

    def test_unknown_brackets_are_text(self):
        assert split_citations("[Note: see above]") == [("[Note: see above]", False)]
        assert not has_citation("[1]")

    def test_empty(self):
        assert split_citations("") == []
