"""Tests for date and amount parsing."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import get_date_range, parse_date

TODAY = date(2024, 5, 15)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2024-01-15", date(2024, 1, 15)),
        ("January 15, 2024", date(2024, 1, 15)),
        ("today", TODAY),
        ("Yesterday", date(2024, 5, 14)),
        ("this month", date(2024, 5, 1)),
        ("last month", date(2024, 4, 1)),
        ("last year", date(2023, 1, 1)),
        ("this quarter", date(2024, 4, 1)),
    ],
)
def test_parse_date(text, expected):
    assert parse_date(text, today=TODAY) == expected


def test_parse_date_invalid():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


@pytest.mark.parametrize(
    "period,start,end",
    [
        ("this-week", date(2024, 5, 13), TODAY),
        ("this-month", date(2024, 5, 1), TODAY),
        ("this-quarter", date(2024, 4, 1), TODAY),
        ("this-year", date(2024, 1, 1), TODAY),
        ("last-week", date(2024, 5, 6), date(2024, 5, 12)),
        ("last-month", date(2024, 4, 1), date(2024, 4, 30)),
        ("last-quarter", date(2024, 1, 1), date(2024, 3, 31)),
        ("last-year", date(2023, 1, 1), date(2023, 12, 31)),
    ],
)
def test_get_date_range(period, start, end):
    date_range = get_date_range(period, today=TODAY)
    assert (date_range.start, date_range.end) == (start, end)


def test_get_date_range_unknown():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$1,234.56", Decimal("1234.56")),
        ("-12.00", Decimal("-12.00")),
        ("(12.00)", Decimal("-12.00")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)
