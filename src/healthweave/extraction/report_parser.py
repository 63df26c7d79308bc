"""Turn the model's markdown into a :class:`ParsedReport`.

Malformed or partial answers never raise. Each list field runs an ordered
tuple of extractors and, if all come back empty, falls back to a
placeholder sentence so ``key_findings`` and ``recommendations`` are never
empty.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Optional

from healthweave.extraction.fallbacks import (
    first_list_block,
    first_paragraph,
    recommendation_block,
    recommendation_sentences,
    truncate_at_section_title,
)
from healthweave.extraction.lists import extract_list, split_list
from healthweave.extraction.sections import extract_section
from healthweave.models import KeyValueRow, ParsedReport
from healthweave.sections import (
    CLINICAL_CORRELATIONS,
    EXECUTIVE_SUMMARY,
    KEY_FINDINGS,
    KEY_VALUES,
    QUESTIONS_FOR_DOCTOR,
    RECOMMENDATIONS,
    REFERENCES,
    UNCERTAINTIES,
)
from healthweave.text import strip_markdown

if TYPE_CHECKING:
    from healthweave.core.config import ExtractionConfig

log = logging.getLogger(__name__)

ListExtractor = Callable[[str], list[str]]

_TABLE_SEPARATOR = re.compile(r"^\|?[\s:|-]+\|?$")
_KEY_VALUE_LINE = re.compile(
    r"^(?P<name>[^:]+):\s*(?P<value>[<>]?=?\s*[\d.,]+|\S+)\s*(?P<unit>[^(]*?)\s*"
    r"(?:\((?:ref(?:erence)?(?:\s*range)?\s*:?\s*)?(?P<ref>[^)]*)\))?\s*$",
    re.IGNORECASE,
)


def _optional(text: Optional[str]) -> Optional[str]:
    return text if text else None


def parse_key_values(body: str) -> list[KeyValueRow]:
    """Rows from a ``| Test | Value | Unit | Reference |`` table or ``Name: value unit (ref: x)`` lines."""
    table_lines = [line.strip() for line in body.splitlines() if line.strip().startswith("|")]
    rows: list[KeyValueRow] = []
    if table_lines:
        has_header = len(table_lines) > 1 and _TABLE_SEPARATOR.match(table_lines[1]) is not None
        for line in table_lines[2:] if has_header else table_lines:
            if _TABLE_SEPARATOR.match(line):
                continue
            cells = [strip_markdown(cell.strip()) for cell in line.strip("|").split("|")]
            if not cells or not cells[0]:
                continue
            cells += [""] * (4 - len(cells))
            rows.append(
                KeyValueRow(name=cells[0], value=cells[1], unit=cells[2], reference_range=cells[3])
            )
        return rows

    for item in split_list(body):
        match = _KEY_VALUE_LINE.match(strip_markdown(item))
        if match is None:
            continue
        rows.append(
            KeyValueRow(
                name=match.group("name").strip(),
                value=match.group("value").strip(),
                unit=(match.group("unit") or "").strip(),
                reference_range=(match.group("ref") or "").strip(),
            )
        )
    return rows


class ReportParser:
    """Extracts every report field from raw markdown."""

    def __init__(self, config: ExtractionConfig) -> None:
        self._config = config
        limit = config.fallback_max_items
        self._findings_extractors: tuple[ListExtractor, ...] = (
            lambda text: extract_list(text, *KEY_FINDINGS.aliases),
            lambda text: first_list_block(text, limit),
        )
        self._recommendation_extractors: tuple[ListExtractor, ...] = (
            lambda text: extract_list(text, *RECOMMENDATIONS.aliases),
            lambda text: recommendation_block(text, limit),
            lambda text: recommendation_sentences(text, limit),
        )

    @staticmethod
    def _first_nonempty(
        text: str, extractors: Sequence[ListExtractor], field: str
    ) -> list[str]:
        for index, extractor in enumerate(extractors):
            items = truncate_at_section_title(extractor(text))
            if items:
                if index:
                    log.info("Extracted %s with fallback #%d (%d items)", field, index, len(items))
                return items
        log.warning("No %s found in model output; using placeholder", field)
        return []

    def key_findings(self, text: str) -> list[str]:
        items = self._first_nonempty(text, self._findings_extractors, "key findings")
        return items or [self._config.findings_placeholder]

    def recommendations(self, text: str) -> list[str]:
        items = self._first_nonempty(text, self._recommendation_extractors, "recommendations")
        return items or [self._config.recommendations_placeholder]

    def summary(self, text: str, correlations: Optional[str]) -> str:
        section = _optional(extract_section(text, *EXECUTIVE_SUMMARY.aliases))
        if section is None:
            return first_paragraph(text) or self._config.summary_placeholder
        if correlations:
            return f"{section}\n\n{correlations}"
        return section

    def parse(
        self,
        raw_markdown: str,
        *,
        provider_identifier: str = "",
        report_id: Optional[str] = None,
        requester_id: str = "anonymous",
        document_names: Sequence[str] = (),
    ) -> ParsedReport:
        text = raw_markdown or ""
        correlations = _optional(extract_section(text, *CLINICAL_CORRELATIONS.aliases))
        key_values_body = extract_section(text, *KEY_VALUES.aliases)

        fields = {
            "summary": self.summary(text, correlations),
            "key_findings": self.key_findings(text),
            "clinical_correlations": correlations,
            "recommendations": self.recommendations(text),
            "uncertainties": _optional(extract_section(text, *UNCERTAINTIES.aliases)),
            "full_markdown": text,
            "provider_identifier": provider_identifier,
            "requester_id": requester_id,
            "document_names": list(document_names),
            "key_values": parse_key_values(key_values_body) if key_values_body else [],
            "questions_for_doctor": truncate_at_section_title(
                extract_list(text, *QUESTIONS_FOR_DOCTOR.aliases)
            ),
            "references": truncate_at_section_title(extract_list(text, *REFERENCES.aliases)),
        }
        if report_id:
            fields["report_id"] = report_id
        report = ParsedReport(**fields)
        log.debug(
            "Parsed report %s: %d findings, %d recommendations, %d key values",
            report.report_id,
            len(report.key_findings),
            len(report.recommendations),
            len(report.key_values),
        )
        return report
