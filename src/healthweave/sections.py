"""Report section vocabulary shared by the prompt and the extractor.

The prompt asks the model for exactly these markdown headers and the
extractor looks them up by the same aliases. Changing a title here changes
both sides at once.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReportSection:
    """A named section of the model's answer."""

    key: str
    title: str
    aliases: tuple[str, ...]
    guidance: str
    is_list: bool = False

    @property
    def heading(self) -> str:
        return f"## {self.title}"


EXECUTIVE_SUMMARY = ReportSection(
    key="summary",
    title="Executive Summary",
    aliases=("Executive Summary", "Summary"),
    guidance=(
        "2-4 sentences giving the most critical findings and their immediate clinical "
        "implications, written like a specialist's case summary."
    ),
)

KEY_VALUES = ReportSection(
    key="key_values",
    title="Key Values (Quick Reference)",
    aliases=("Key Values (Quick Reference)", "Key Values", "Quick Reference"),
    guidance=(
        "A markdown table with columns | Test | Value | Unit | Reference | listing every "
        "measured value that has a stated reference range."
    ),
    is_list=True,
)

KEY_FINDINGS = ReportSection(
    key="key_findings",
    title="Key Findings",
    aliases=("Key Findings", "Findings"),
    guidance=(
        "A numbered list, one item per clinical category, each written as "
        "**Category:** finding with value, units, reference range and interpretation."
    ),
    is_list=True,
)

CLINICAL_CORRELATIONS = ReportSection(
    key="clinical_correlations",
    title="Clinical Correlations",
    aliases=("Clinical Correlations", "Correlations"),
    guidance=(
        "How findings from different documents relate: temporal trends, confirmatory or "
        "contradictory evidence, patterns of progression or treatment response."
    ),
)

RECOMMENDATIONS = ReportSection(
    key="recommendations",
    title="Recommendations",
    aliases=("Recommendations", "Recommendation"),
    guidance=(
        "A numbered list of specific, actionable recommendations, each written as "
        "**Action:** detail with urgency, interval or referral rationale."
    ),
    is_list=True,
)

QUESTIONS_FOR_DOCTOR = ReportSection(
    key="questions_for_doctor",
    title="Questions for Your Doctor",
    aliases=("Questions for Your Doctor", "Questions for the Doctor", "Questions"),
    guidance="A numbered list of questions the patient could bring to their next visit.",
    is_list=True,
)

UNCERTAINTIES = ReportSection(
    key="uncertainties",
    title="Uncertainties and Limitations",
    aliases=("Uncertainties and Limitations", "Uncertainties", "Limitations"),
    guidance=(
        "Findings needing more information, limits of the available testing or "
        "documentation, and gaps that would change the interpretation."
    ),
)

REFERENCES = ReportSection(
    key="references",
    title="References",
    aliases=("References", "Sources"),
    guidance="A bulleted list expanding every citation tag used above.",
    is_list=True,
)

# Order is the order the model must emit them in.
REQUIRED_SECTIONS: tuple[ReportSection, ...] = (
    EXECUTIVE_SUMMARY,
    KEY_VALUES,
    KEY_FINDINGS,
    CLINICAL_CORRELATIONS,
    RECOMMENDATIONS,
    QUESTIONS_FOR_DOCTOR,
    UNCERTAINTIES,
    REFERENCES,
)


def section_titles_lower() -> frozenset[str]:
    """Every alias of every section, lowercased, for stop-word checks."""
    return frozenset(alias.lower() for section in REQUIRED_SECTIONS for alias in section.aliases)
