"""
PDF loading: per-page plain text via pdfplumber.

Everything downstream works on the materialized page list; nothing reads the
PDF after this step.
"""

import logging
from pathlib import Path

import pdfplumber

logger = logging.getLogger(__name__)

_X_TOLERANCE = 1.5    # points between glyphs before a space is inserted
_Y_TOLERANCE = 3      # points between baselines still read as one line
DEFAULT_TOC_PAGE = 2  # 1-based; page 1 is the cover


def extract_page_texts(pdf_path: str) -> list[str]:
    texts: list[str] = []
    with pdfplumber.open(pdf_path) as pdf:
        for page in pdf.pages:
            text = page.extract_text(x_tolerance=_X_TOLERANCE, y_tolerance=_Y_TOLERANCE) or ""
            texts.append(text)
    return texts


def toc_text_from(pages: list[str], toc_page: int = DEFAULT_TOC_PAGE) -> str:
    index = toc_page - 1
    if not 0 <= index < len(pages):
        raise IndexError(f"ToC page {toc_page} does not exist in a {len(pages)}-page document")
    return pages[index]


def load_document(state: dict) -> dict:
    """Read every page's text and pick out the ToC page."""
    pdf_path = state["pdf_path"]
    path = Path(pdf_path)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    logger.info("Extracting page text: %s", pdf_path)
    pages = extract_page_texts(str(path))
    toc_text = toc_text_from(pages, state.get("toc_page", DEFAULT_TOC_PAGE))

    empty = sum(1 for p in pages if not p.strip())
    if empty:
        logger.warning("%d of %d pages have no extractable text", empty, len(pages))
    logger.info("Loaded %d pages, ToC %d chars", len(pages), len(toc_text))
    return {"pages": pages, "toc_text": toc_text, "document_id": str(path)}
