"""
Resolves configured sections against the ToC and extracts each one in order.

A configured title is joined to a ToC entry by exact title, then by
normalized title (case, accents and punctuation folded), then by substring.
The ToC entry after it supplies the stopping header and page.

Some price lists list the same title twice and only one of the occurrences is
the real section. Those cases are configuration: an override table keyed by
(document type, title) gives the zero-based occurrence to use.
"""

import logging
import re
import unicodedata
from collections.abc import Sequence
from dataclasses import dataclass, field

from pricelist_parser.errors import HeaderNotFound, PageValidationFailure, ResolutionFailure
from pricelist_parser.pipeline.boundaries import BoundaryResolver
from pricelist_parser.pipeline.headers import HeaderMatcher
from pricelist_parser.pipeline.layout import PageIndexMapper
from pricelist_parser.state import ExtractionOutcome, PageLayoutMode, ResolvedSection, SectionSpec, TocEntry

logger = logging.getLogger(__name__)

OccurrenceOverrides = dict[tuple[str, str], int]

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WS_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    folded = unicodedata.normalize("NFKD", title.lower())
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return _WS_RE.sub(" ", _NON_WORD_RE.sub("", folded)).strip()


def _pick(indices: list[int], occurrence: int | None, title: str) -> int:
    if occurrence is None:
        return indices[0]
    if occurrence < len(indices):
        logger.info("Using occurrence %d of %r (%d in ToC)", occurrence, title, len(indices))
        return indices[occurrence]
    logger.warning(
        "Occurrence %d of %r requested but ToC lists it %d time(s), using the first",
        occurrence, title, len(indices),
    )
    return indices[0]


def find_toc_index(entries: Sequence[TocEntry], title: str, occurrence: int | None = None) -> int | None:
    """Index of the ToC entry a configured title resolves to, or None."""
    exact = [i for i, e in enumerate(entries) if e["title"] == title]
    if exact:
        return _pick(exact, occurrence, title)

    target = normalize_title(title)
    if not target:
        return None
    normalized = [normalize_title(e["title"]) for e in entries]
    same = [i for i, n in enumerate(normalized) if n == target]
    if same:
        return _pick(same, occurrence, title)

    partial = [i for i, n in enumerate(normalized) if n and (target in n or n in target)]
    if partial:
        return _pick(partial, occurrence, title)
    return None


@dataclass
class ExtractionContext:
    """Everything one extraction run needs. Built per document, never shared."""

    document_type: str
    pages: Sequence[str]
    toc_entries: list[TocEntry]
    mapper: PageIndexMapper
    resolver: BoundaryResolver
    overrides: OccurrenceOverrides = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        document_type: str,
        pages: Sequence[str],
        toc_entries: list[TocEntry],
        layout_mode: PageLayoutMode,
        overrides: OccurrenceOverrides | None = None,
        reflow_variants: Sequence[tuple[str, str]] = (),
        verify_next_page: bool = False,
    ) -> "ExtractionContext":
        mapper = PageIndexMapper(layout_mode)
        resolver = BoundaryResolver(pages, mapper, HeaderMatcher(reflow_variants), verify_next_page)
        return cls(document_type, pages, toc_entries, mapper, resolver, dict(overrides or {}))

    def occurrence_for(self, title: str) -> int | None:
        return self.overrides.get((self.document_type, title))


def resolve_section(context: ExtractionContext, spec: SectionSpec) -> ResolvedSection:
    entries = context.toc_entries
    index = find_toc_index(entries, spec["title"], context.occurrence_for(spec["title"]))
    if index is None:
        raise ResolutionFailure(spec["title"])

    entry = entries[index]
    following = entries[index + 1] if index + 1 < len(entries) else None
    return ResolvedSection(
        key=spec["key"],
        title=spec["title"],
        start_physical_page=context.mapper.to_physical_index(entry["nominal_page"]),
        nominal_page=entry["nominal_page"],
        next_title=following["title"] if following else None,
        next_nominal_page=following["nominal_page"] if following else None,
    )


def _failed(key: str, error: str) -> ExtractionOutcome:
    return ExtractionOutcome(key=key, raw_text=None, character_count=0, error=error)


def extract_section(context: ExtractionContext, spec: SectionSpec) -> ExtractionOutcome:
    """Extract one section. Only PageValidationFailure escapes."""
    try:
        resolved = resolve_section(context, spec)
        logger.info(
            "Extracting %r from page %d (next: %r, page %s)",
            spec["title"], resolved["nominal_page"], resolved["next_title"], resolved["next_nominal_page"],
        )
        text = context.resolver.extract(resolved)
    except (ResolutionFailure, HeaderNotFound) as exc:
        logger.warning("Failed to extract %r: %s", spec["title"], exc)
        return _failed(spec["key"], str(exc))

    if not text:
        logger.warning("No content extracted for %r", spec["title"])
        return _failed(spec["key"], f"Section {spec['title']!r} is empty")

    logger.info("Extracted %r (%d chars)", spec["title"], len(text))
    return ExtractionOutcome(key=spec["key"], raw_text=text, character_count=len(text), error=None)


def check_specs(specs: Sequence[SectionSpec]) -> None:
    seen: set[str] = set()
    for spec in specs:
        if spec["key"] in seen:
            raise ValueError(f"Duplicate section key: {spec['key']!r}")
        seen.add(spec["key"])


def extract_sections(state: dict) -> dict:
    """Extract every configured section, one at a time, in configured order."""
    specs: list[SectionSpec] = state["section_specs"]
    check_specs(specs)

    context = ExtractionContext.build(
        document_type=state.get("document_type", ""),
        pages=state["pages"],
        toc_entries=state["toc_entries"],
        layout_mode=state["layout_mode"],
        overrides=state.get("occurrence_overrides"),
        reflow_variants=state.get("reflow_variants", ()),
        verify_next_page=state.get("verify_next_page", False),
    )

    outcomes: dict[str, ExtractionOutcome] = {}
    failures: list[PageValidationFailure] = []
    for spec in specs:
        try:
            outcomes[spec["key"]] = extract_section(context, spec)
        except PageValidationFailure as exc:
            logger.error("%s", exc)
            failures.append(exc)
            outcomes[spec["key"]] = _failed(spec["key"], str(exc))

    return {"outcomes": outcomes, "validation_failures": failures}
