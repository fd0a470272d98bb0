from pricelist_parser.pipeline.toc import Strategy, TocFormat, TocParser, parse_toc


def _pairs(entries):
    return [(e["title"], e["nominal_page"]) for e in entries]


def test_multiline_dot_leaders():
    text = "OBSAH\nVoľnosť ........ 4\nDátové služby . . . . . . 6\nRoaming 12"
    entries = TocParser().parse(text)
    assert _pairs(entries) == [("Voľnosť", 4), ("Dátové služby", 6), ("Roaming", 12)]


def test_single_line_toc():
    text = "OBSAH Voľnosť ........ 4 Dátové služby ........ 6 Roaming ........ 12"
    entries = TocParser().parse(text)
    assert _pairs(entries) == [("Voľnosť", 4), ("Dátové služby", 6), ("Roaming", 12)]


def test_fragmented_lines_are_joined_and_configured_titles_keep_digits():
    fragments = [
        "MOBILNÝ INTERNET", "........", "4",
        "5G INTERNET", "........", "6",
        "DOPLNKOVÉ SLUŽBY", "........", "8",
        "ZMENA PROGRAMU", "........", "10",
    ]
    specs = [
        {"key": "mobile", "title": "MOBILNÝ INTERNET"},
        {"key": "5g", "title": "5G INTERNET"},
    ]
    entries = TocParser(specs).parse("\n".join(fragments))
    assert _pairs(entries) == [
        ("MOBILNÝ INTERNET", 4),
        ("5G INTERNET", 6),
        ("DOPLNKOVÉ SLUŽBY", 8),
        ("ZMENA PROGRAMU", 10),
    ]


def test_digits_in_unconfigured_title_are_not_pages():
    entries = TocParser().parse("MOBILNÝ INTERNET ........ 4 5G INTERNET ........ 6")
    assert _pairs(entries) == [("MOBILNÝ INTERNET", 4), ("INTERNET", 6)]


def test_direct_strategy_is_tried_first(specs):
    parser = TocParser(specs)
    matches = parser.scan("INTERNET V ZAHRANIČÍ ........ 6")
    assert len(matches) == 1
    assert matches[0].strategy is Strategy.DIRECT
    assert matches[0].title == "INTERNET V ZAHRANIČÍ"


def test_duplicates_kept_and_sorted_by_page():
    text = "ZMENA PROGRAMU ..... 10\nINTERNET V ZAHRANIČÍ ..... 9\nINTERNET V ZAHRANIČÍ ..... 6"
    entries = TocParser().parse(text)
    assert _pairs(entries) == [
        ("INTERNET V ZAHRANIČÍ", 6),
        ("INTERNET V ZAHRANIČÍ", 9),
        ("ZMENA PROGRAMU", 10),
    ]


def test_unparseable_toc_is_empty():
    assert TocParser().parse("") == []
    assert TocParser().parse("Poznámka: všetky ceny sú uvedené s DPH") == []


def test_page_zero_rejected():
    assert TocParser().parse("ÚVOD ........ 0") == []


def test_page_first_format():
    text = "04   Radosť 05   Spoločné ustanovenia 06   Dátové služby"
    entries = TocParser(toc_format=TocFormat.PAGE_FIRST).parse(text)
    assert _pairs(entries) == [("Radosť", 4), ("Spoločné ustanovenia", 5), ("Dátové služby", 6)]


def test_parse_toc_step(toc_text, specs):
    result = parse_toc({"toc_text": toc_text, "section_specs": specs})
    assert _pairs(result["toc_entries"]) == [
        ("MOBILNÝ INTERNET", 4),
        ("INTERNET V ZAHRANIČÍ", 6),
        ("DOPLNKOVÉ SLUŽBY", 8),
        ("INTERNET V ZAHRANIČÍ", 9),
        ("ZMENA PROGRAMU", 10),
    ]


def test_note_lines_are_not_entries():
    text = "MOBILNÝ INTERNET ..... 4\nPoznámka: akcia platí 6\nINTERNET V ZAHRANIČÍ ..... 6"
    entries = TocParser().parse(text)
    assert _pairs(entries) == [("MOBILNÝ INTERNET", 4), ("INTERNET V ZAHRANIČÍ", 6)]


def test_short_titles_dropped_unless_configured():
    text = "TV ..... 5\nROAMING ..... 7"
    assert _pairs(TocParser().parse(text)) == [("ROAMING", 7)]
    assert _pairs(TocParser([{"key": "tv", "title": "TV"}]).parse(text)) == [("TV", 5), ("ROAMING", 7)]


def test_extra_ignore_markers():
    text = "ROAMING ..... 7\nPlatí od 2025"
    assert _pairs(TocParser().parse(text)) == [("ROAMING", 7), ("Platí od", 2025)]
    assert _pairs(TocParser(ignore=["platí od"]).parse(text)) == [("ROAMING", 7)]


def test_ten_lines_stay_separate_eleven_are_joined():
    fragments = [
        "MOBILNÝ INTERNET", ".....", "4",
        "DOPLNKOVÉ SLUŽBY", ".....", "8",
        "ZMENA PROGRAMU", ".....", "10",
        "ZÁVER",
    ]
    assert TocParser().parse("\n".join(fragments)) == []
    entries = TocParser().parse("\n".join(fragments + ["12"]))
    assert _pairs(entries) == [
        ("MOBILNÝ INTERNET", 4),
        ("DOPLNKOVÉ SLUŽBY", 8),
        ("ZMENA PROGRAMU", 10),
        ("ZÁVER", 12),
    ]
