"""CLI entry point for the price list section extractor."""

import argparse
import json
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv

from pricelist_parser.config import ProviderConfig, load_provider_config
from pricelist_parser.errors import ConfigError, SectionValidationError
from pricelist_parser.pipeline.assembler import assemble
from pricelist_parser.pipeline.layout import detect_layout
from pricelist_parser.pipeline.loader import load_document
from pricelist_parser.pipeline.sectioner import extract_sections
from pricelist_parser.pipeline.toc import TocFormat, parse_toc
from pricelist_parser.state import ExtractionResult, PageLayoutMode, SectionSpec

logger = logging.getLogger(__name__)


def _extract(state: dict) -> ExtractionResult:
    state.update(parse_toc(state))
    state.update(detect_layout(state))
    state.update(extract_sections(state))
    state.update(assemble(state))

    if state["validation_failures"]:
        raise SectionValidationError(state["validation_failures"], state["result"])
    return state["result"]


def run_extraction(
    document_id: str,
    pages: Sequence[str],
    toc_text: str,
    sections: Sequence[SectionSpec],
    *,
    document_type: str = "",
    occurrence_overrides: dict[tuple[str, str], int] | None = None,
    toc_format: TocFormat = TocFormat.TITLE_FIRST,
    toc_ignore: Sequence[str] = (),
    layout_mode: PageLayoutMode | None = None,
    reflow_variants: Sequence[tuple[str, str]] = (),
    verify_next_page: bool = False,
) -> ExtractionResult:
    """Extract sections from already-materialized page text.

    Raises SectionValidationError, carrying the complete result, when any
    section's text opens on the wrong page.
    """
    state: dict = {
        "document_id": document_id,
        "document_type": document_type,
        "pages": list(pages),
        "toc_text": toc_text,
        "section_specs": list(sections),
        "occurrence_overrides": occurrence_overrides or {},
        "toc_format": toc_format,
        "toc_ignore": list(toc_ignore),
        "layout_mode": layout_mode,
        "reflow_variants": list(reflow_variants),
        "verify_next_page": verify_next_page,
    }
    return _extract(state)


def run_pipeline(pdf_path: str, provider: ProviderConfig) -> ExtractionResult:
    """Load a price list PDF and extract the provider's sections."""
    state: dict = {
        "pdf_path": pdf_path,
        "toc_page": provider.toc_page,
        "document_type": provider.name,
        "section_specs": list(provider.sections),
        "occurrence_overrides": provider.occurrence_overrides,
        "toc_format": provider.toc_format,
        "toc_ignore": provider.toc_ignore,
        "layout_mode": provider.layout,
        "reflow_variants": provider.reflow_variants,
        "verify_next_page": provider.verify_next_page,
    }
    state.update(load_document(state))
    return _extract(state)


def _write(result: ExtractionResult, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2, ensure_ascii=False)


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Extract ToC sections from a telecom price list PDF.")
    parser.add_argument("pdf_path", help="Path to the price list PDF")
    parser.add_argument("--provider", "-p", required=True, help="Provider name in the config file")
    parser.add_argument("--config", "-c", default=None, help="Provider config JSON (default: $PRICELIST_CONFIG)")
    parser.add_argument("--output", "-o", default="output/sections.json")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    pdf_path = Path(args.pdf_path)
    if not pdf_path.exists():
        logger.error("File not found: %s", pdf_path)
        return 1

    try:
        provider = load_provider_config(args.provider, args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1

    output_path = Path(args.output)
    start = time.time()
    logger.info("Extracting %s sections from %s", provider.name, pdf_path)

    status = 0
    try:
        result = run_pipeline(str(pdf_path), provider)
    except SectionValidationError as exc:
        for failure in exc.failures:
            logger.error("  %s: %s", failure.key, failure.reason)
        result = exc.result
        status = 2
    except Exception:
        logger.exception("Pipeline failed")
        return 1

    _write(result, output_path)

    summary = result["summary"]
    logger.info("Done: %d/%d sections -> %s (%.1fs)",
                summary["successful_extractions"], summary["total_sections"],
                output_path, time.time() - start)
    return status


if __name__ == "__main__":
    sys.exit(main())
