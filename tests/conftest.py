import pytest

TOC_TEXT = """2 OBSAH
MOBILNÝ INTERNET ........ 4
INTERNET V ZAHRANIČÍ ........ 6
DOPLNKOVÉ SLUŽBY ........ 8
INTERNET V ZAHRANIČÍ ........ 9
ZMENA PROGRAMU ........ 10"""

# Double-sided: cover, ToC, then two nominal pages per sheet.
PAGES = [
    "CENNÍK SLUŽIEB Platný od 1. januára",
    TOC_TEXT,
    "4 5 MOBILNÝ INTERNET Balík 5 GB za 10 € mesačne. Neobmedzené dáta v sieti.",
    "6 7 INTERNET V ZAHRANIČÍ Zóna 1 0,20 €/MB. Ostatné zóny podľa cenníka.",
    "8 9 DOPLNKOVÉ SLUŽBY Hlasová schránka zdarma. INTERNET V ZAHRANIČÍ Denný balík 3 € za 1 GB.",
    "10 11 ZMENA PROGRAMU Zmena programu je bezplatná.",
]

SPECS = [
    {"key": "mobile_internet", "title": "MOBILNÝ INTERNET"},
    {"key": "roaming_data", "title": "INTERNET V ZAHRANIČÍ"},
    {"key": "extra_services", "title": "DOPLNKOVÉ SLUŽBY"},
    {"key": "program_change", "title": "ZMENA PROGRAMU"},
]


@pytest.fixture
def pages():
    return list(PAGES)


@pytest.fixture
def toc_text():
    return TOC_TEXT


@pytest.fixture
def specs():
    return [dict(s) for s in SPECS]
