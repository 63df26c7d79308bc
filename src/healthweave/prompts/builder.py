"""Assemble the system instruction and user message for one analysis."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from healthweave.models import PromptPair, SourceDocument
from healthweave.prompts.document_types import classify_document
from healthweave.prompts.templates import analysis
from healthweave.sections import REQUIRED_SECTIONS, ReportSection

log = logging.getLogger(__name__)


def render_skeleton(sections: Sequence[ReportSection] = REQUIRED_SECTIONS) -> str:
    """The exact header skeleton the model must reproduce."""
    return "\n\n".join(f"{section.heading}\n[{section.guidance}]" for section in sections)


def render_checklist(sections: Sequence[ReportSection] = REQUIRED_SECTIONS) -> str:
    return "\n".join(
        f"{i}. **{section.title}**: {section.guidance}" for i, section in enumerate(sections, 1)
    )


class PromptBuilder:
    """Builds a :class:`PromptPair` from documents and optional context.

    Pure: the same documents and context always give the same prompt, and
    document text is never truncated.
    """

    def __init__(self, sections: Sequence[ReportSection] = REQUIRED_SECTIONS) -> None:
        self._sections = tuple(sections)
        self._system = analysis.get("SYSTEM_PROMPT").format(skeleton=render_skeleton(self._sections))

    @property
    def system_instruction(self) -> str:
        return self._system

    def build(
        self,
        documents: Sequence[SourceDocument],
        context: Optional[str] = None,
    ) -> PromptPair:
        parts = [analysis.get("USER_PREAMBLE")]

        if context and context.strip():
            parts.append(analysis.get("CONTEXT_BLOCK").format(context=context.strip()))

        parts.append(analysis.get("DOCUMENTS_HEADER"))
        for index, doc in enumerate(documents, 1):
            content = doc.extracted_text if doc.extracted_text.strip() else analysis.get("MISSING_CONTENT")
            doc_type = classify_document(doc.display_name, content)
            parts.append(
                analysis.get("DOCUMENT_BLOCK").format(
                    index=index,
                    name=doc.display_name,
                    doc_type=doc_type.value,
                    content=content,
                )
            )

        parts.append(
            analysis.get("REQUIREMENTS_BLOCK").format(checklist=render_checklist(self._sections))
        )

        pair = PromptPair(system_instruction=self._system, user_message="\n\n".join(parts))
        log.debug(
            "Built prompt for %d document(s): %d input chars",
            len(documents),
            pair.input_chars,
        )
        return pair
