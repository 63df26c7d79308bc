"""Tests for section lookup and list splitting."""

from __future__ import annotations

from healthweave.extraction.lists import (
    bullet_lines,
    emphasized_rows,
    extract_list,
    indented_bullet_lines,
    numbered_lines,
    plain_lines,
    split_list,
)
from healthweave.extraction.sections import (
    emphasized_label_style,
    extract_section,
    heading_style,
    plain_label_style,
)


class TestExtractSection:
    def test_heading_captures_until_next_heading(self):
        text = "## Key Findings\n1. ALT high\n2. AST normal\n\n## Recommendations\n1. Recheck"
        assert extract_section(text, "Key Findings") == "1. ALT high\n2. AST normal"

    def test_heading_captures_to_end_of_text(self):
        text = "## Summary\nStable.\n\n## Uncertainties\nNo prior imaging.\n"
        assert extract_section(text, "Uncertainties") == "No prior imaging."

    def test_heading_stops_at_deeper_heading(self):
        text = "## Key Findings\nIntro\n### Hepatic\nALT high"
        assert extract_section(text, "Key Findings") == "Intro"

    def test_numbered_and_bold_heading(self):
        text = "## 2. **Key Findings**\n- one\n## 3. Recommendations\n- two"
        assert extract_section(text, "Key Findings") == "- one"

    def test_heading_match_is_case_insensitive(self):
        text = "# KEY FINDINGS\n- one"
        assert extract_section(text, "Key Findings") == "- one"

    def test_emphasized_label(self):
        text = "**Summary:** Patient is stable.\n**Findings:** ALT high"
        assert extract_section(text, "Summary") == "Patient is stable."

    def test_emphasized_label_with_colon_outside(self):
        text = "**Summary**: Patient is stable.\n**Findings**: ALT high"
        assert emphasized_label_style(text, "Summary") == "Patient is stable."

    def test_plain_label_stops_at_known_section_label(self):
        text = "Summary: Stable overall.\nStill stable.\nRecommendations: Rest."
        assert extract_section(text, "Summary") == "Stable overall.\nStill stable."

    def test_missing_section_returns_none(self):
        assert extract_section("Nothing relevant here.", "Key Findings") is None

    def test_empty_header_returns_empty_string(self):
        text = "## Key Findings\n## Recommendations\n1. Rest"
        assert extract_section(text, "Key Findings") == ""

    def test_empty_inputs(self):
        assert extract_section("", "Summary") is None
        assert extract_section("## Summary\nx") is None

    def test_heading_style_wins_over_emphasized_alias(self):
        text = "**Summary:** inline label\n\n## Executive Summary\nFrom the heading"
        assert extract_section(text, "Summary", "Executive Summary") == "From the heading"

    def test_aliases_tried_in_order_within_style(self):
        text = "## Findings\nfrom findings\n## Key Findings\nfrom key findings"
        assert extract_section(text, "Key Findings", "Findings") == "from key findings"

    def test_alias_does_not_match_longer_word(self):
        assert heading_style("## Summaryish\nx", "Summary") is None

    def test_plain_label_requires_line_start(self):
        assert plain_label_style("The Summary: is here", "Summary") is None


class TestListStrategies:
    def test_emphasized_rows_keep_label(self):
        block = "1. **Hepatic:** ALT 45\n2. **Renal:** Creatinine 1.0"
        assert emphasized_rows(block) == ["**Hepatic:** ALT 45", "**Renal:** Creatinine 1.0"]

    def test_emphasized_rows_append_indented_continuation(self):
        block = "1. **Hepatic:** ALT high\n   - AST normal\n2. **Renal:** ok"
        assert emphasized_rows(block) == ["**Hepatic:** ALT high AST normal", "**Renal:** ok"]

    def test_numbered_lines(self):
        assert numbered_lines("1. Rest\n2) Fluids\nnot a list") == ["Rest", "Fluids"]

    def test_bullet_lines(self):
        assert bullet_lines("- a\n* b\n• c") == ["a", "b", "c"]

    def test_indented_bullet_lines(self):
        assert indented_bullet_lines("Intro\n  - a\n\t- b") == ["a", "b"]

    def test_plain_lines_drop_heading_like_lines(self):
        assert plain_lines("### Sub\nLine one\n\n---\nLine two") == ["Line one", "Line two"]

    def test_plain_lines_fall_back_to_deformatted_text(self):
        assert plain_lines("**Note**") == ["Note"]

    def test_numbered_lines_win_over_stray_bullets(self):
        block = "1. **Hepatic:** ALT high\n2. **Renal:** ok\n- stray bullet"
        assert split_list(block) == ["**Hepatic:** ALT high", "**Renal:** ok"]

    def test_mixed_labeled_and_plain_items_keep_every_item(self):
        block = "1. **Hepatic:** ALT 45\n2. Platelets low\n3. Anemia present"
        assert emphasized_rows(block) == []
        assert split_list(block) == ["**Hepatic:** ALT 45", "Platelets low", "Anemia present"]

    def test_unmarked_mixed_lines_fall_back_to_plain_lines(self):
        block = "**Hepatic:** ALT 45\nPlatelets low"
        assert split_list(block) == ["**Hepatic:** ALT 45", "Platelets low"]

    def test_intro_prose_does_not_block_labeled_rows(self):
        block = "Main findings:\n1. **Hepatic:** ALT 45\n2. **Renal:** ok"
        assert emphasized_rows(block) == ["**Hepatic:** ALT 45", "**Renal:** ok"]


class TestExtractList:
    def test_emphasized_findings_example(self):
        text = "## Key Findings\n1. **Hepatic:** ALT 45 (normal)\n2. **Hematologic:** Platelets low"
        assert extract_list(text, "Key Findings") == [
            "**Hepatic:** ALT 45 (normal)",
            "**Hematologic:** Platelets low",
        ]

    def test_mixed_findings_list_keeps_unlabeled_items(self):
        text = "## Key Findings\n1. **Hepatic:** ALT 45\n2. Platelets low\n3. Anemia present"
        assert extract_list(text, "Key Findings") == [
            "**Hepatic:** ALT 45",
            "Platelets low",
            "Anemia present",
        ]

    def test_numbered_before_bullets(self):
        text = "## Recommendations\n1. Rest\n- aside\n2. Fluids"
        assert extract_list(text, "Recommendations") == ["Rest", "Fluids"]

    def test_unmarked_content_is_never_dropped(self):
        text = "## Uncertainties\nNo prior labs.\n\nImaging was limited."
        assert extract_list(text, "Uncertainties") == ["No prior labs.", "Imaging was limited."]

    def test_missing_section(self):
        assert extract_list("## Summary\nok", "Key Findings") == []

    def test_empty_section(self):
        assert extract_list("## Key Findings\n\n## Summary\nok", "Key Findings") == []
