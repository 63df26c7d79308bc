"""Classify an uploaded document into a clinical category.

Categories are a data table of ``(label, filename pattern, content pattern)``
rows tried in order. Short keywords (``lab``, ``ct``, ``note``) are only
trusted in the filename; the content sample is matched on longer clinical
phrases. The first row with a match wins.
"""

from __future__ import annotations

import re
from enum import Enum


class DocumentType(str, Enum):
    LABORATORY = "Laboratory Results"
    IMAGING = "Imaging Study"
    PATHOLOGY = "Pathology Report"
    CLINICAL_NOTE = "Clinical Note"
    GENETIC = "Genetic Test Report"
    CARDIOLOGY = "Cardiology Study"
    GENERIC = "Clinical Document"


# Characters of content inspected alongside the filename.
CONTENT_SAMPLE_CHARS = 1000

# Short tokens must not match inside longer words ("ct" in "doctor").
_B = r"(?<![a-z])"
_E = r"(?![a-z])"

_TYPE_PATTERNS: tuple[tuple[DocumentType, re.Pattern[str], re.Pattern[str]], ...] = (
    (
        DocumentType.LABORATORY,
        re.compile(_B + r"lab|cbc"),
        re.compile(r"laboratory|reference range|test result|" + _B + r"cbc" + _E + r"|comprehensive metabolic"),
    ),
    (
        DocumentType.IMAGING,
        re.compile(r"ultrasound|" + _B + r"(?:ct|mri)" + _E + r"|x-ray|elastography|fibrosis"),
        re.compile(r"ultrasound|imaging|echogenicity|elastography"),
    ),
    (
        DocumentType.PATHOLOGY,
        re.compile(r"pathology|biopsy"),
        re.compile(r"pathology|histology|microscopic"),
    ),
    (
        DocumentType.CLINICAL_NOTE,
        re.compile(_B + r"notes?" + _E + r"|visit"),
        re.compile(r"clinical note|progress note|physician note"),
    ),
    (
        DocumentType.GENETIC,
        re.compile(r"genetic|" + _B + r"vcf" + _E),
        re.compile(r"genetic test|variant|hgvs|acmg"),
    ),
    (
        DocumentType.CARDIOLOGY,
        re.compile(_B + r"(?:ecg|ekg|echo)" + _E),
        re.compile(r"ejection fraction|echocardiogram"),
    ),
)


def classify_document(filename: str, content: str) -> DocumentType:
    """Return the first category whose filename or content pattern matches."""
    name = filename.lower()
    sample = content[:CONTENT_SAMPLE_CHARS].lower()
    for doc_type, name_pattern, content_pattern in _TYPE_PATTERNS:
        if name_pattern.search(name) or content_pattern.search(sample):
            return doc_type
    return DocumentType.GENERIC
