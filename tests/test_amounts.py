from decimal import Decimal

import pytest

from bean_ledger.amounts import AmountParseError, format_amount, parse_amount, round_cents


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("150.00", "150.00"), ("-150", "-150"), ("+3", "3"), (".5", "0.5"), ("7.", "7")],
)
def test_parse_amount_accepts_plain_decimals(raw, expected):
    assert parse_amount(raw) == Decimal(expected)


@pytest.mark.parametrize(
    "raw", ["", "1_000", "١٠٠", "1e3", "NaN", "Infinity", "1.2.3", "1,000"]
)
def test_parse_amount_rejects_tokens_outside_the_grammar(raw):
    with pytest.raises(AmountParseError):
        parse_amount(raw)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1.005", "1.01"),
        ("0.125", "0.13"),
        ("-0.125", "-0.12"),
        ("-1.005", "-1.00"),
        ("-0.126", "-0.13"),
        ("2.004", "2.00"),
    ],
)
def test_round_cents_sends_halves_up(value, expected):
    assert round_cents(Decimal(value)) == Decimal(expected)


def test_format_amount_never_prints_negative_zero():
    assert format_amount(Decimal("-0.004")) == "0.00"
    assert format_amount(Decimal("-12.5")) == "-12.50"
