"""Tests for parsing and calendar helpers."""

from datetime import date
from decimal import Decimal

import pytest

from loan_calc.utils import add_months, decimal_from_str, parse_amount, parse_date


@pytest.mark.parametrize(
    "start, months, expected",
    [
        (date(2024, 1, 1), 1, date(2024, 2, 1)),
        (date(2024, 11, 15), 3, date(2025, 2, 15)),
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2023, 1, 31), 1, date(2023, 2, 28)),
        (date(2024, 8, 31), 1, date(2024, 9, 30)),
        (date(2024, 2, 29), 12, date(2025, 2, 28)),
        (date(2024, 3, 15), -3, date(2023, 12, 15)),
        (date(2024, 5, 10), 0, date(2024, 5, 10)),
    ],
)
def test_add_months(start, months, expected) -> None:
    assert add_months(start, months) == expected


def test_add_months_returns_new_value() -> None:
    start = date(2024, 1, 31)
    add_months(start, 1)
    assert start == date(2024, 1, 31)


def test_parse_date() -> None:
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date(" 2024-06 ") == date(2024, 6, 1)
    with pytest.raises(ValueError):
        parse_date("2024-02-30")
    with pytest.raises(ValueError):
        parse_date("15/01/2024")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("500000", Decimal("500000")),
        ("500,000.50", Decimal("500000.50")),
        ("500k", Decimal("500000")),
        ("1.2M", Decimal("1200000")),
        (2500, Decimal("2500")),
        (Decimal("7.5"), Decimal("7.5")),
    ],
)
def test_parse_amount(value, expected) -> None:
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", ["abc", "", "nan", "inf", "k"])
def test_invalid_amounts(value) -> None:
    with pytest.raises(ValueError):
        parse_amount(value)


def test_decimal_from_str_strips_separators() -> None:
    assert decimal_from_str(" 1,234.5 ") == Decimal("1234.5")
