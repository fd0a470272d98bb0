"""
Carving one section's text out of the page sequence.

Scanning starts at the section's ToC page and runs a small state machine:

  SEEKING     look for the section's own header
  COLLECTING  header found; gather text until the next section's header
              shows up, or until the next section's ToC page is reached
  DONE        text assembled
  NOT_FOUND   ran off the end of the document without seeing the header

The assembled text is then checked against the expected page number, with a
policy that depends on the document layout.
"""

import logging
import re
from collections.abc import Sequence
from enum import Enum

from pricelist_parser.errors import HeaderNotFound, PageValidationFailure
from pricelist_parser.pipeline.headers import HeaderMatch, HeaderMatcher, HeaderRole
from pricelist_parser.pipeline.layout import PageIndexMapper
from pricelist_parser.state import PageLayoutMode, ResolvedSection

logger = logging.getLogger(__name__)

_LEADING_PAGE_NUMBERS_RE = re.compile(r"^\s*(\d+(?:\s+\d+)?)(?=\s|$)")
_NUMBER_RE = re.compile(r"\d+")


class ScanState(str, Enum):
    SEEKING = "seeking"
    COLLECTING = "collecting"
    DONE = "done"
    NOT_FOUND = "not_found"


class StrictValidation:
    """One of the first two numbers in the text must be the expected page."""

    name = "strict"

    def check(self, text: str, expected_page: int) -> str | None:
        if not text or not text.strip():
            return "Extracted text is empty"
        numbers = [int(n) for n in _NUMBER_RE.findall(text[:200])[:2]]
        if not numbers:
            return f"No page numbers found at start of text: {text[:100]!r}"
        if expected_page in numbers:
            return None
        found = "-".join(str(n) for n in numbers)
        return f"Expected page {expected_page}, but found pages {found} at start of text"


class LenientValidation:
    """Single-sided documents number their pages loosely.

    Substantial text is accepted whatever numbers it opens with; short text
    must open within a couple of pages of the expected one.
    """

    name = "lenient"
    min_length = 50
    tolerance = 2

    def check(self, text: str, expected_page: int) -> str | None:
        if not text or not text.strip():
            return "Extracted text is empty"
        numbers = [int(n) for n in _NUMBER_RE.findall(text[:200])[:2]]
        if len(text) > self.min_length:
            if numbers and expected_page not in numbers:
                logger.warning(
                    "Expected page %d, text opens with %s; accepting %d chars from a single-sided document",
                    expected_page, numbers, len(text),
                )
            return None
        if any(abs(n - expected_page) <= self.tolerance for n in numbers):
            return None
        return f"Expected page {expected_page} within {self.tolerance} pages, found {numbers or 'no numbers'}"


def policy_for(mode: PageLayoutMode) -> StrictValidation | LenientValidation:
    if mode is PageLayoutMode.SINGLE_SIDED:
        return LenientValidation()
    return StrictValidation()


def leading_page_numbers(page_text: str) -> str:
    m = _LEADING_PAGE_NUMBERS_RE.match(page_text)
    return m.group(1) if m else ""


class BoundaryResolver:
    """Extracts a resolved section's text from one document's pages."""

    def __init__(
        self,
        pages: Sequence[str],
        mapper: PageIndexMapper,
        matcher: HeaderMatcher | None = None,
        verify_next_page: bool = False,
    ):
        self.pages = pages
        self.mapper = mapper
        self.matcher = matcher or HeaderMatcher()
        self.verify_next_page = verify_next_page
        self.policy = policy_for(mapper.mode)

    def extract(self, section: ResolvedSection) -> str:
        """Return the section's text, validated against its ToC page.

        Raises HeaderNotFound if the header never appears, and
        PageValidationFailure if the text opens on the wrong page.
        """
        text = self.collect(section)
        if not text:
            return text
        error = self.policy.check(text, section["nominal_page"])
        if error:
            raise PageValidationFailure(section["key"], section["title"], section["nominal_page"], error)
        return text

    def collect(self, section: ResolvedSection) -> str:
        title = section["title"]
        next_title = section["next_title"]
        next_page = section["next_nominal_page"]
        start_index = section["start_physical_page"]
        stop_index = self.mapper.to_physical_index(next_page) if next_page else None

        state = ScanState.SEEKING
        chunks: list[str] = []

        for index in range(start_index, len(self.pages)):
            page_text = self.pages[index] or ""

            if state is ScanState.SEEKING:
                own = self.matcher.find(page_text, title, HeaderRole.OWN)
                if own is None:
                    logger.debug("Page %d: no %r header", index, title)
                    continue
                logger.debug("Found %r header on page %d", title, index)
                state = ScanState.COLLECTING
                prefix = leading_page_numbers(page_text[:own.start])

                nxt = self._next_header(page_text, next_title, next_page, index, own.end)
                if nxt is not None:
                    logger.debug("Page %d also holds next header %r", index, next_title)
                    chunks.append(_join(prefix, page_text[own.start:nxt.start]))
                    state = ScanState.DONE
                    break
                chunks.append(_join(prefix, page_text[own.start:]))
                if stop_index is not None and index >= stop_index:
                    state = ScanState.DONE
                    break
                continue

            nxt = self._next_header(page_text, next_title, next_page, index)
            if nxt is not None:
                logger.debug("Found next header %r on page %d", next_title, index)
                chunks.append(page_text[:nxt.start])
                state = ScanState.DONE
                break
            chunks.append(page_text)
            if stop_index is not None and index >= stop_index:
                logger.warning(
                    "Reached page %d of next section %r without its header, stopping %r there",
                    next_page, next_title, title,
                )
                state = ScanState.DONE
                break
        else:
            if state is ScanState.SEEKING:
                state = ScanState.NOT_FOUND

        if state is ScanState.NOT_FOUND:
            raise HeaderNotFound(title, section["nominal_page"])
        return "\n".join(c.strip() for c in chunks if c.strip()).strip()

    def _next_header(
        self,
        page_text: str,
        next_title: str | None,
        next_page: int | None,
        index: int,
        start: int = 0,
    ) -> HeaderMatch | None:
        if not next_title:
            return None
        match = self.matcher.find(page_text, next_title, HeaderRole.NEXT, start)
        if match is None:
            return None
        if self.verify_next_page and next_page and next_page not in self.mapper.nominal_pages_on(index):
            logger.debug("Ignoring %r header on page %d, ToC puts it on page %d", next_title, index, next_page)
            return None
        return match


def _join(prefix: str, chunk: str) -> str:
    return f"{prefix} {chunk}" if prefix else chunk
