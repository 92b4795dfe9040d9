"""Tests for the formatted-value parser."""

import pytest

from statement_analyzer.valueparse import clean_value, is_chartable, parse_value


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,234", 1234.0),
        ("AED 500", 500.0),
        ("(2,500)", -2500.0),
        ("1.5M", 1500000.0),
        ("3K", 3000.0),
        ("2B", 2000000000.0),
    ],
)
def test_documented_values(raw, expected):
    assert parse_value(raw) == expected


def test_suffix_is_case_insensitive():
    assert parse_value("2.5m") == pytest.approx(2.5e6)
    assert parse_value("4k") == 4000.0
    assert parse_value("1b") == 1e9


def test_currency_and_suffix_together():
    assert parse_value("AED 1,250,000") == 1250000.0
    assert parse_value("AED 3.5M") == pytest.approx(3.5e6)
    assert parse_value("(2.3M)") == pytest.approx(-2.3e6)
    assert parse_value("$ 12,000K") == pytest.approx(12e6)


def test_leading_numeral_only():
    # Trailing text after the numeral is ignored
    assert parse_value("1.2.3") == 1.2
    assert parse_value("45%") == 45.0
    assert parse_value("5.0x") == 5.0
    assert parse_value(".5K") == 500.0
    assert parse_value("-.5K") == -500.0
    assert parse_value("+7") == 7.0


def test_no_exponent_notation():
    # "1e5" reads as 1 followed by junk; the last char "5" is no suffix
    assert parse_value("1e5") == 1.0


# --- Unparseable input degrades to 0.0 ---


@pytest.mark.parametrize("raw", ["N/A", "", "   ", "See appendix", "USD 100", "-", "((5", "$", "١٢٣", "٥M"])
def test_unparseable_is_zero(raw):
    assert parse_value(raw) == 0.0


@pytest.mark.parametrize("raw", [None, 1234, 12.5, ["1"], {"value": "1"}])
def test_non_string_is_zero(raw):
    assert parse_value(raw) == 0.0


def test_aed_token_is_case_sensitive():
    assert parse_value("aed 500") == 0.0
    assert parse_value("500 AED") == 500.0


def test_overflow_is_zero():
    assert parse_value("9" * 400) == 0.0


def test_genuine_zero_is_indistinguishable_from_failure():
    assert parse_value("0") == parse_value("N/A") == 0.0
    assert parse_value("(0)") == 0.0
    assert not is_chartable(parse_value("0.00"))


def test_clean_value_swaps_parentheses_without_validation():
    assert clean_value("(1,234)") == "-1234"
    assert clean_value("AED (5))") == "-5"
    assert clean_value("((5") == "--5"


def test_is_chartable():
    assert is_chartable(-0.01)
    assert is_chartable(3.0)
    assert not is_chartable(0.0)
    assert not is_chartable(-0.0)
