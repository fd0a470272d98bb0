"""
Locating section headers in page text.

A header is the section title standing on its own: preceded by whitespace,
the start of the page, the page's "4 5" number pair, or the π bullet, and
followed by whitespace or the end of the page. A title embedded in a longer
word never counts. Whitespace inside a title matches any whitespace run, since
headers are often broken across lines.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable

logger = logging.getLogger(__name__)

# Text-reflow variants, lowercase. Headers broken across a line lose the space.
REFLOW_VARIANTS: tuple[tuple[str, str], ...] = (
    ("preslužby", "pre služby"),
    ("pre služby", "preslužby"),
)

_BULLETS = "π"
_PAGE_PAIR_TAIL_RE = re.compile(r"(?<!\S)\d+\s+\d+$")
_LOOKBACK = 24


class HeaderRole(str, Enum):
    OWN = "own"      # the section being extracted
    NEXT = "next"    # the section that ends it


@dataclass(frozen=True)
class HeaderMatch:
    start: int
    end: int
    text: str
    flexible: bool = False


@lru_cache(maxsize=None)
def header_pattern(title: str) -> re.Pattern:
    words = r"\s+".join(re.escape(w) for w in title.split())
    return re.compile(words, re.IGNORECASE)


def is_uppercase_title(title: str) -> bool:
    return title == title.upper() and title != title.lower()


def _standalone_before(text: str, index: int) -> bool:
    if index == 0:
        return True
    ch = text[index - 1]
    if ch.isspace() or ch in _BULLETS:
        return True
    return _PAGE_PAIR_TAIL_RE.search(text[max(0, index - _LOOKBACK):index]) is not None


def _standalone_after(text: str, index: int) -> bool:
    return index >= len(text) or text[index].isspace()


class HeaderMatcher:
    """Finds standalone section headers, with a table of reflow variants."""

    def __init__(self, variants: Iterable[tuple[str, str]] = ()):
        self.variants = REFLOW_VARIANTS + tuple((src.lower(), dst.lower()) for src, dst in variants)

    def find(
        self,
        page_text: str,
        title: str,
        role: HeaderRole = HeaderRole.OWN,
        start: int = 0,
    ) -> HeaderMatch | None:
        """First header occurrence of title at or after start, or None."""
        if not page_text or not title or not title.strip():
            return None

        # Uppercase ToC titles are typeset in capitals as headers; the same
        # words in lowercase prose are not the next section starting.
        require_upper = role is HeaderRole.NEXT and is_uppercase_title(title)

        match = self._find_exact(page_text, title, start, require_upper)
        if match is not None:
            return match

        lowered = title.lower()
        for src, dst in self.variants:
            if src not in lowered:
                continue
            variant = lowered.replace(src, dst)
            match = self._find_exact(page_text, variant, start, require_upper)
            if match is not None:
                logger.debug("Header %r matched via reflow variant %r", title, variant)
                return HeaderMatch(match.start, match.end, match.text, flexible=True)
        return None

    def contains(self, page_text: str, title: str, role: HeaderRole = HeaderRole.OWN) -> bool:
        return self.find(page_text, title, role) is not None

    @staticmethod
    def _find_exact(page_text: str, title: str, start: int, require_upper: bool) -> HeaderMatch | None:
        for m in header_pattern(title.strip()).finditer(page_text, start):
            if not (_standalone_before(page_text, m.start()) and _standalone_after(page_text, m.end())):
                continue
            found = m.group(0)
            if require_upper and found != found.upper():
                continue
            return HeaderMatch(m.start(), m.end(), found)
        return None


_default_matcher = HeaderMatcher()


def contains_header(page_text: str, title: str, role: HeaderRole = HeaderRole.OWN) -> bool:
    return _default_matcher.contains(page_text, title, role)
