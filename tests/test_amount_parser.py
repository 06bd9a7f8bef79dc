"""Tests for user amount parsing."""

from decimal import Decimal

import pytest

from pocketledger.domain.errors import InvalidArgument
from pocketledger.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$10", Decimal("10")),
        ("€ 7.5", Decimal("7.5")),
        ("1,234.56", Decimal("1234.56")),
        ("₽500", Decimal("500")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "0", "-5", "$", "NaN"])
def test_rejects_invalid_amount(text):
    with pytest.raises(InvalidArgument):
        parse_amount(text)
