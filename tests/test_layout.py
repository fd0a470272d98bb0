import pytest

from pricelist_parser.pipeline.layout import (
    PageIndexMapper,
    contains_page_number,
    detect_layout,
    detect_layout_mode,
    nominal_pages_on,
    to_nominal_page,
    to_physical_index,
)
from pricelist_parser.state import PageLayoutMode

SINGLE = PageLayoutMode.SINGLE_SIDED
DOUBLE = PageLayoutMode.DOUBLE_SIDED


def test_single_sided_detected():
    pages = ["cover", "toc", "3 Úvod", "4 Volania", "5 Správy", "6 Dáta", "7 Roaming"]
    assert detect_layout_mode(pages) is SINGLE


def test_double_sided_detected():
    pages = ["cover", "toc", "4 5 Volania Správy", "", "8 9 Roaming", ""]
    assert detect_layout_mode(pages) is DOUBLE


def test_tie_defaults_to_double_sided():
    assert detect_layout_mode(["cover", "toc", "no numbers here"]) is DOUBLE
    assert detect_layout_mode([]) is DOUBLE


def test_page_number_must_be_standalone():
    assert contains_page_number("strana 4 z 20", 4)
    assert not contains_page_number("balík 45 GB", 4)
    assert not contains_page_number("4G sieť", 4)


@pytest.mark.parametrize("nominal, index", [(1, 0), (2, 1), (3, 2), (4, 2), (5, 2), (6, 3), (7, 3), (8, 4), (21, 10)])
def test_double_sided_mapping(nominal, index):
    assert to_physical_index(nominal, DOUBLE) == index


def test_single_sided_mapping():
    assert [to_physical_index(p, SINGLE) for p in (1, 2, 3, 10)] == [0, 1, 2, 9]
    assert [to_nominal_page(i, SINGLE) for i in (0, 1, 2, 9)] == [1, 2, 3, 10]


def test_round_trip():
    for page in range(1, 60):
        assert to_nominal_page(to_physical_index(page, SINGLE), SINGLE) == page
    for page in [1, 2] + list(range(4, 60, 2)):
        assert to_nominal_page(to_physical_index(page, DOUBLE), DOUBLE) == page
    for index in range(0, 30):
        for mode in PageLayoutMode:
            assert to_physical_index(to_nominal_page(index, mode), mode) == index


def test_every_page_lands_on_a_sheet_that_prints_it():
    for page in [1, 2] + list(range(4, 60)):
        assert page in nominal_pages_on(to_physical_index(page, DOUBLE), DOUBLE)


def test_invalid_pages_rejected():
    with pytest.raises(ValueError):
        to_physical_index(0, SINGLE)
    with pytest.raises(ValueError):
        to_nominal_page(-1, DOUBLE)


def test_mapper_keeps_detected_mode():
    mapper = PageIndexMapper.detect(["cover", "toc", "4 5 a", "6 7 b"])
    assert mapper.mode is DOUBLE
    assert mapper.to_physical_index(7) == 3
    assert mapper.to_nominal_page(3) == 6
    assert list(mapper.nominal_pages_on(3)) == [6, 7]


def test_detect_layout_step_honours_configured_mode(pages):
    assert detect_layout({"pages": pages})["layout_mode"] is DOUBLE
    assert detect_layout({"pages": pages, "layout_mode": "single-sided"})["layout_mode"] is SINGLE
