"""Utility functions for the loan calculator.

This module provides helpers for parsing user input into Python data types and
for handling dates, including adding months and normalizing date strings to
``datetime.date`` instances. It uses Python's ``datetime`` and ``calendar``
modules to calculate month offsets.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, getcontext
import calendar

getcontext().prec = 28  # increase decimal precision to avoid rounding errors


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date`` object.

    A bare ``YYYY-MM`` string is accepted as well and maps to the first day
    of that month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("-")
        if len(parts) == 2:
            return date(int(parts[0]), int(parts[1]), 1)
        if len(parts) != 3:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29). ``months`` may be
    negative.
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace. It raises
    ``ValueError`` if conversion fails or the value is not finite.
    """
    try:
        result = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value) -> Decimal:
    """Parse an amount with optional ``k``/``m`` suffixes.

    Accepts plain numbers (``"500000"``, ``500000``), thousands separators
    (``"500,000"``) and shorthand such as ``"500k"`` or ``"1.2m"``.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return decimal_from_str(str(value))
    text = str(value).strip().lower().replace(",", "")
    factor = Decimal(1)
    if text.endswith("k"):
        factor = Decimal(1_000)
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal(1_000_000)
        text = text[:-1]
    return decimal_from_str(text) * factor
