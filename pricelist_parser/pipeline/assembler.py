"""
pipeline/assembler.py: final result and summary.

Outcomes keep the configured section order. No extraction happens here.
"""

import logging

from pricelist_parser.state import ExtractionInfo, ExtractionOutcome, ExtractionResult, ExtractionSummary

logger = logging.getLogger(__name__)

METHOD = "toc-guided-header"


def summarize(outcomes: dict[str, ExtractionOutcome]) -> ExtractionSummary:
    successful = [o for o in outcomes.values() if o["raw_text"] is not None]
    return ExtractionSummary(
        total_sections=len(outcomes),
        successful_extractions=len(successful),
        failed_extractions=len(outcomes) - len(successful),
        total_characters=sum(o["character_count"] for o in successful),
    )


def assemble(state: dict) -> dict:
    """Bundle outcomes, summary and extraction info into the run result."""
    outcomes = state.get("outcomes", {})
    summary = summarize(outcomes)
    layout = state.get("layout_mode")

    result = ExtractionResult(
        sections=outcomes,
        summary=summary,
        extraction_info=ExtractionInfo(
            method=METHOD,
            document=str(state.get("document_id", "")),
            layout=layout.value if layout is not None else "",
            toc_sections=len(state.get("toc_entries", [])),
        ),
    )

    logger.info(
        "Extraction summary: %d sections, %d extracted, %d failed, %d chars",
        summary["total_sections"], summary["successful_extractions"],
        summary["failed_extractions"], summary["total_characters"],
    )
    return {"result": result}
