"""Tests for whole-text fallback heuristics."""

from __future__ import annotations

from healthweave.extraction.fallbacks import (
    first_list_block,
    first_paragraph,
    recommendation_block,
    recommendation_sentences,
    truncate_at_section_title,
)


class TestFirstListBlock:
    def test_stops_at_first_prose_line(self):
        text = "Intro text\n\n1. a\n2. b\n   - nested\n3. c\nTrailing prose\n- d"
        assert first_list_block(text) == ["a", "b", "c"]

    def test_respects_max_items(self):
        text = "\n".join(f"- item {i}" for i in range(20))
        assert len(first_list_block(text, max_items=10)) == 10

    def test_no_list(self):
        assert first_list_block("Just prose.\nMore prose.") == []


class TestRecommendationFallbacks:
    def test_block_under_recommend_label(self):
        text = (
            "Some analysis.\n\n**Recommended next steps**\n- Repeat ALT\n- See hepatology\n\n"
            "## Other\n- unrelated"
        )
        assert recommendation_block(text) == ["Repeat ALT", "See hepatology"]

    def test_block_requires_list_lines(self):
        assert recommendation_block("## Recommendation\nRest and fluids.") == []

    def test_sentences_with_recommendation_verbs(self):
        text = "The liver looks fine. Consider repeat testing in 3 months"
        assert recommendation_sentences(text) == ["Consider repeat testing in 3 months"]

    def test_sentences_deduplicated_and_capped(self):
        text = "Monitor weekly. Monitor weekly. Refer to cardiology. Schedule echo."
        assert recommendation_sentences(text, max_items=2) == ["Monitor weekly.", "Refer to cardiology."]


class TestFirstParagraph:
    def test_skips_headings_and_lists(self):
        text = "## Title\n\n- list\n\nSome prose here.\nMore.\n\n- list"
        assert first_paragraph(text) == "Some prose here. More."

    def test_none_for_structure_only(self):
        assert first_paragraph("## Title\n\n| a | b |\n\n---") is None


class TestTruncateAtSectionTitle:
    def test_cuts_at_section_title(self):
        items = ["Rest", "**Questions for Your Doctor:**", "Should I worry?"]
        assert truncate_at_section_title(items) == ["Rest"]

    def test_keeps_ordinary_items(self):
        assert truncate_at_section_title(["Rest", "Fluids"]) == ["Rest", "Fluids"]
