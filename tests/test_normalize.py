import pytest

from bank_book_recon.matching.normalize import normalize, normalize_reference


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Vendor Payment - ACH", "vendor payment ach"),
        ("  ACH   Vendor,Payment!! ", "ach vendor payment"),
        ("POS #4411 STARBUCKS", "pos 4411 starbucks"),
        ("already clean", "already clean"),
    ],
)
def test_normalize_strips_punctuation_and_whitespace(text, expected):
    assert normalize(text) == expected


def test_normalize_is_total():
    assert normalize("") == ""
    assert normalize(None) == ""
    assert normalize("...---...") == ""


def test_normalize_is_idempotent():
    once = normalize("Wire Transfer: ACME Corp. (Invoice #12)")
    assert normalize(once) == once


def test_normalize_reference():
    assert normalize_reference("chk-001 ") == "CHK001"
    assert normalize_reference("--") is None
    assert normalize_reference(None) is None
