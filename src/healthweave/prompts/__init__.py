"""Prompt construction for the clinical synthesis call."""

from __future__ import annotations

from healthweave.prompts.builder import PromptBuilder
from healthweave.prompts.document_types import DocumentType, classify_document

__all__ = ["DocumentType", "PromptBuilder", "classify_document"]
