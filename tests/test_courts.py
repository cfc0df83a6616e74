import pytest

from app.causelist import courts
from app.causelist.portals import registered_courts, resolve_adapter
from app.causelist.portal_aphc import AphcAdapter
from app.causelist.portal_tshc import TshcAdapter
from app.causelist.errors import UnsupportedCourt


@pytest.mark.parametrize(
    "value, expected",
    [
        ("andhra_pradesh", courts.ANDHRA_PRADESH),
        ("Andhra Pradesh", courts.ANDHRA_PRADESH),
        ("andhra-pradesh", courts.ANDHRA_PRADESH),
        ("Andhrapradesh", courts.ANDHRA_PRADESH),
        ("APHC", courts.ANDHRA_PRADESH),
        ("Telangana", courts.TELANGANA),
        (" tshc ", courts.TELANGANA),
        ("Karnataka", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_court(value, expected):
    assert courts.normalize_court(value) == expected


def test_resolve_adapter_returns_fresh_instances():
    first = resolve_adapter("Telangana")
    second = resolve_adapter("telangana")

    assert isinstance(first, TshcAdapter)
    assert first is not second
    assert isinstance(resolve_adapter("ap"), AphcAdapter)


def test_resolve_adapter_unknown_court():
    with pytest.raises(UnsupportedCourt) as excinfo:
        resolve_adapter("Madras")

    assert excinfo.value.court == "Madras"


def test_registered_courts_match_known_courts():
    assert registered_courts() == sorted(courts.ALL_COURTS)
