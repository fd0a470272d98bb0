"""
Table-of-contents parsing: raw ToC page text -> ordered (title, page) entries.

Each candidate entry is offered to an ordered list of strategies and the first
one that yields a usable (title, page) pair wins:

  1. direct      a configured title literal, leader filler, a page number.
                 Titles with digits in them ("5G INTERNET") only parse here.
  2. dot-leader  "<title> ........ <page>"
  3. fallback    "<non-digit text> <page>"

Entries found by the generic strategies are dropped as noise when the title is
shorter than MIN_TITLE_LENGTH, purely numeric, or contains an ignore marker
such as "Poznámka:". Configured titles are never dropped.

Duplicate titles are kept. Picking the right occurrence is the caller's job.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Iterable

from pricelist_parser.state import SectionSpec, TocEntry

logger = logging.getLogger(__name__)

MAX_TOC_LINES = 10      # above this, lines are fragments of one text run
MIN_TITLE_LENGTH = 4
IGNORE_MARKERS: tuple[str, ...] = ("Poznámka:",)

_PAGE = r"(?P<page>\d+)(?=\s|$)"
_FILLER = r"[\s.…·_\-–]+"

_HEADING_RE = re.compile(r"^\s*(?:\d+\s+)?OBSAH\b[:\s]*", re.IGNORECASE)
_DOT_LEADER_RE = re.compile(r"(?P<title>[^\d]+?)\s*(?:[.…](?:\s?[.…])+|…|\s{2,})[\s.…]*" + _PAGE)
_FALLBACK_RE = re.compile(r"(?P<title>\D+?)\s+" + _PAGE)
_PAGE_FIRST_RE = re.compile(r"(?P<page>\d+)\s+(?P<title>\D+?)(?=\s+\d|\s*$)")
_SKIP_TOKEN_RE = re.compile(r"\S+\s*")
_TITLE_JUNK = " \t\n.…·_-–"


class TocFormat(str, Enum):
    TITLE_FIRST = "title-first"
    PAGE_FIRST = "page-first"


class Strategy(str, Enum):
    DIRECT = "direct"
    DOT_LEADER = "dot-leader"
    FALLBACK = "fallback"
    PAGE_FIRST = "page-first"


@dataclass(frozen=True)
class TocMatch:
    strategy: Strategy
    title: str
    page: int
    start: int
    end: int

    @property
    def usable(self) -> bool:
        return self.page > 0 and bool(self.title)


MatchFn = Callable[[str, int], "TocMatch | None"]


@lru_cache(maxsize=None)
def title_pattern(title: str) -> re.Pattern:
    """Direct ToC pattern for one configured title. Pure, so cached process-wide."""
    words = r"\s+".join(re.escape(w) for w in title.split())
    return re.compile(words + _FILLER + _PAGE, re.IGNORECASE)


@lru_cache(maxsize=None)
def page_first_title_pattern(title: str) -> re.Pattern:
    words = r"\s+".join(re.escape(w) for w in title.split())
    return re.compile(r"(?P<page>\d+)\s+" + words + r"(?=\s|$)", re.IGNORECASE)


def _clean_title(raw: str) -> str:
    return " ".join(raw.split()).strip(_TITLE_JUNK)


def _regex_strategy(strategy: Strategy, pattern: re.Pattern) -> MatchFn:
    def match_at(text: str, pos: int) -> TocMatch | None:
        m = pattern.match(text, pos)
        if not m:
            return None
        return TocMatch(strategy, _clean_title(m.group("title")), int(m.group("page")), m.start(), m.end())
    return match_at


def _direct_strategy(titles: list[str], fmt: TocFormat) -> MatchFn:
    # Longest first so "INTERNET V ZAHRANIČÍ" wins over "INTERNET".
    build = page_first_title_pattern if fmt is TocFormat.PAGE_FIRST else title_pattern
    patterns = [(t, build(t)) for t in sorted(set(titles), key=len, reverse=True)]

    def match_at(text: str, pos: int) -> TocMatch | None:
        for title, pattern in patterns:
            m = pattern.match(text, pos)
            if m:
                return TocMatch(Strategy.DIRECT, title, int(m.group("page")), m.start(), m.end())
        return None
    return match_at


class TocParser:
    """Parses ToC text, with direct patterns for the configured titles."""

    def __init__(
        self,
        sections: Iterable[SectionSpec] = (),
        toc_format: TocFormat = TocFormat.TITLE_FIRST,
        ignore: Iterable[str] = (),
    ):
        self.toc_format = TocFormat(toc_format)
        self.ignore = IGNORE_MARKERS + tuple(m for m in ignore if m)
        titles = [s["title"] for s in sections if s["title"].strip()]
        self.strategies: list[MatchFn] = [_direct_strategy(titles, self.toc_format)]
        if self.toc_format is TocFormat.PAGE_FIRST:
            self.strategies.append(_regex_strategy(Strategy.PAGE_FIRST, _PAGE_FIRST_RE))
        else:
            self.strategies.append(_regex_strategy(Strategy.DOT_LEADER, _DOT_LEADER_RE))
            self.strategies.append(_regex_strategy(Strategy.FALLBACK, _FALLBACK_RE))

    def parse(self, toc_text: str) -> list[TocEntry]:
        matches: list[TocMatch] = []
        for line in self._lines(toc_text):
            matches.extend(self.scan(line))

        entries = [TocEntry(title=m.title, nominal_page=m.page) for m in matches]
        entries.sort(key=lambda e: e["nominal_page"])

        if not entries:
            logger.warning("No ToC entries recognised in %d chars of ToC text", len(toc_text or ""))
        else:
            direct = sum(1 for m in matches if m.strategy is Strategy.DIRECT)
            logger.info("Parsed %d ToC entries (%d via configured titles)", len(entries), direct)
        return entries

    def scan(self, line: str) -> list[TocMatch]:
        """Consume a line left to right, one candidate entry at a time."""
        found: list[TocMatch] = []
        pos = 0
        while pos < len(line):
            if line[pos].isspace():
                pos += 1
                continue
            match = self._match_at(line, pos)
            if match is None:
                pos = _SKIP_TOKEN_RE.match(line, pos).end()
                continue
            if self.is_noise(match):
                # The whole span goes, so the tail of a note cannot parse as an entry.
                logger.debug("ToC noise dropped: %r -> %d", match.title, match.page)
                pos = match.end
                continue
            logger.debug("ToC %s: %r -> %d", match.strategy.value, match.title, match.page)
            found.append(match)
            pos = match.end
        return found

    def is_noise(self, match: TocMatch) -> bool:
        if match.strategy is Strategy.DIRECT:
            return False
        title = match.title
        return (
            len(title) < MIN_TITLE_LENGTH
            or title.isdigit()
            or any(marker.lower() in title.lower() for marker in self.ignore)
        )

    def _match_at(self, line: str, pos: int) -> TocMatch | None:
        for strategy in self.strategies:
            match = strategy(line, pos)
            if match is not None and match.usable:
                return match
        return None

    @staticmethod
    def _lines(toc_text: str) -> list[str]:
        lines = [ln.strip() for ln in (toc_text or "").splitlines() if ln.strip()]
        if len(lines) > MAX_TOC_LINES:
            lines = [" ".join(lines)]
        if lines:
            lines[0] = _HEADING_RE.sub("", lines[0], count=1)
        return [ln for ln in lines if ln]


def parse_toc(state: dict) -> dict:
    """Parse the ToC page text into entries sorted by nominal page."""
    parser = TocParser(
        state.get("section_specs", []),
        state.get("toc_format", TocFormat.TITLE_FIRST),
        state.get("toc_ignore", ()),
    )
    return {"toc_entries": parser.parse(state.get("toc_text", ""))}
