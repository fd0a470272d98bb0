"""
Nominal <-> physical page mapping.

Price lists come in two shapes. Single-sided: nominal page N is physical index
N-1. Double-sided: the cover (1) and the ToC (2) are sheets of their own, and
from page 4 on every sheet carries two nominal pages, so pages 4-5 sit on
index 2, 6-7 on index 3 and so on. Page 3 does not exist in those documents
and is mapped onto the first spread.
"""

import logging
import re
from collections.abc import Sequence

from pricelist_parser.state import PageLayoutMode

logger = logging.getLogger(__name__)

PROBE_PAGES = range(4, 7)
FIRST_SPREAD_PAGE = 4
FIRST_SPREAD_INDEX = 2


def to_physical_index(nominal_page: int, mode: PageLayoutMode) -> int:
    if nominal_page < 1:
        raise ValueError(f"Cannot map nominal page {nominal_page} to a physical index")
    if nominal_page <= 2 or mode is PageLayoutMode.SINGLE_SIDED:
        return nominal_page - 1
    if nominal_page < FIRST_SPREAD_PAGE:
        return FIRST_SPREAD_INDEX
    return (nominal_page - FIRST_SPREAD_PAGE) // 2 + FIRST_SPREAD_INDEX


def to_nominal_page(physical_index: int, mode: PageLayoutMode) -> int:
    """First nominal page printed on a physical page."""
    if physical_index < 0:
        raise ValueError(f"Cannot map physical index {physical_index} to a nominal page")
    if physical_index <= 1 or mode is PageLayoutMode.SINGLE_SIDED:
        return physical_index + 1
    return (physical_index - FIRST_SPREAD_INDEX) * 2 + FIRST_SPREAD_PAGE


def nominal_pages_on(physical_index: int, mode: PageLayoutMode) -> range:
    """All nominal pages printed on a physical page."""
    first = to_nominal_page(physical_index, mode)
    if mode is PageLayoutMode.DOUBLE_SIDED and physical_index >= FIRST_SPREAD_INDEX:
        return range(first, first + 2)
    return range(first, first + 1)


def contains_page_number(page_text: str, page_number: int) -> bool:
    return re.search(rf"(?<!\S){page_number}(?!\S)", page_text or "") is not None


def score_layouts(pages: Sequence[str], probe: Sequence[int] = PROBE_PAGES) -> dict[PageLayoutMode, int]:
    scores = {mode: 0 for mode in PageLayoutMode}
    for nominal in probe:
        for mode in PageLayoutMode:
            index = to_physical_index(nominal, mode)
            if index < len(pages) and contains_page_number(pages[index], nominal):
                scores[mode] += 1
    return scores


def detect_layout_mode(pages: Sequence[str], probe: Sequence[int] = PROBE_PAGES) -> PageLayoutMode:
    """Pick the layout whose mapping puts the probe page numbers on the right pages.

    Ties go to double-sided: assuming it on a single-sided document only skips
    content, the other way round loses it.
    """
    try:
        scores = score_layouts(pages, probe)
    except (TypeError, ValueError) as exc:
        logger.warning("Could not detect page layout, defaulting to double-sided: %s", exc)
        return PageLayoutMode.DOUBLE_SIDED

    if scores[PageLayoutMode.SINGLE_SIDED] > scores[PageLayoutMode.DOUBLE_SIDED]:
        mode = PageLayoutMode.SINGLE_SIDED
    else:
        mode = PageLayoutMode.DOUBLE_SIDED
    logger.info(
        "Detected %s layout (single=%d, double=%d)",
        mode.value, scores[PageLayoutMode.SINGLE_SIDED], scores[PageLayoutMode.DOUBLE_SIDED],
    )
    return mode


class PageIndexMapper:
    """Page mapping bound to one document's detected layout."""

    def __init__(self, mode: PageLayoutMode):
        self.mode = PageLayoutMode(mode)

    @classmethod
    def detect(cls, pages: Sequence[str]) -> "PageIndexMapper":
        return cls(detect_layout_mode(pages))

    def to_physical_index(self, nominal_page: int) -> int:
        return to_physical_index(nominal_page, self.mode)

    def to_nominal_page(self, physical_index: int) -> int:
        return to_nominal_page(physical_index, self.mode)

    def nominal_pages_on(self, physical_index: int) -> range:
        return nominal_pages_on(physical_index, self.mode)


def detect_layout(state: dict) -> dict:
    """Detect the layout once per document; an explicit layout_mode wins."""
    mode = state.get("layout_mode")
    if mode is None:
        mode = detect_layout_mode(state["pages"])
    else:
        logger.info("Using configured %s layout", PageLayoutMode(mode).value)
    return {"layout_mode": PageLayoutMode(mode)}
