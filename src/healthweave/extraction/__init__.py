"""Heuristic extraction of report sections from model markdown."""

from __future__ import annotations

from healthweave.extraction.lists import extract_list
from healthweave.extraction.report_parser import ReportParser
from healthweave.extraction.sections import extract_section

__all__ = ["ReportParser", "extract_list", "extract_section"]
