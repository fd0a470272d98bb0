import pytest

from pricelist_parser.pipeline.loader import load_document, toc_text_from


def test_toc_page_is_one_based():
    assert toc_text_from(["cover", "obsah", "3 text"]) == "obsah"
    assert toc_text_from(["cover", "obsah", "3 text"], 3) == "3 text"


def test_toc_page_out_of_range():
    with pytest.raises(IndexError):
        toc_text_from(["cover"], 2)
    with pytest.raises(IndexError):
        toc_text_from(["cover", "obsah"], 0)


def test_missing_pdf(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document({"pdf_path": str(tmp_path / "missing.pdf")})
