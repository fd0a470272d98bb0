"""
Shared records for the section extraction pipeline.
"""

from enum import Enum
from typing import TypedDict


class PageLayoutMode(str, Enum):
    SINGLE_SIDED = "single-sided"
    DOUBLE_SIDED = "double-sided"   # two nominal pages per sheet from page 4 on


class TocEntry(TypedDict):
    title: str
    nominal_page: int    # as printed in the ToC


class SectionSpec(TypedDict):
    key: str       # storage key in the output
    title: str     # title as listed in the ToC


class ResolvedSection(TypedDict):
    key: str
    title: str
    start_physical_page: int    # 0-indexed
    nominal_page: int
    next_title: str | None      # following ToC entry, if any
    next_nominal_page: int | None


class ExtractionOutcome(TypedDict):
    key: str
    raw_text: str | None
    character_count: int
    error: str | None


class ExtractionSummary(TypedDict):
    total_sections: int
    successful_extractions: int
    failed_extractions: int
    total_characters: int


class ExtractionInfo(TypedDict):
    method: str
    document: str
    layout: str
    toc_sections: int


class ExtractionResult(TypedDict):
    sections: dict[str, ExtractionOutcome]
    summary: ExtractionSummary
    extraction_info: ExtractionInfo
