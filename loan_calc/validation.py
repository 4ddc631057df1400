"""Input validation for loan parameters.

The validator turns raw, free-form user input (web form fields, CLI options)
into a :class:`LoanParameters` instance. Every field is checked and all
problems are reported together through :class:`ValidationError`, so the
caller can show one message next to each invalid field. Validation never
computes a schedule; it only checks that one could be computed.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, Overflow
from typing import Dict, Mapping, Optional

from .data_models import FREQUENCY_CHOICES, PERIODS_PER_YEAR, Frequency, LoanParameters
from .engine import calculate_level_payment, months_per_period, periodic_rate
from .exceptions import ValidationError
from .utils import parse_amount, parse_date

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _number(raw: Mapping[str, object], field: str, errors: Dict[str, str]) -> Optional[Decimal]:
    value = raw.get(field)
    if _blank(value):
        errors[field] = f"{field} must be a number"
        return None
    try:
        return parse_amount(value)
    except ValueError:
        errors[field] = f"{field} must be a number"
        return None


def _frequency(raw: Mapping[str, object], errors: Dict[str, str]) -> Optional[Frequency]:
    value = raw.get("frequency")
    if _blank(value):
        return Frequency.MONTHLY
    try:
        return Frequency(str(value).strip().lower())
    except ValueError:
        errors["frequency"] = "frequency must be one of " + ", ".join(FREQUENCY_CHOICES)
        return None


def _start_date(raw: Mapping[str, object], errors: Dict[str, str]) -> Optional[date]:
    value = raw.get("start_date")
    if isinstance(value, date):
        return value
    try:
        return parse_date(value)
    except ValueError:
        errors["start_date"] = "start_date must be a date (YYYY-MM-DD)"
        return None


def _check_calendar_range(
    start: date, moratorium: int, periods: int, frequency: Frequency, errors: Dict[str, str]
) -> None:
    """Reject schedules whose payment dates would run past ``date.max``."""
    months_left = (date.max.year - start.year) * 12 + (date.max.month - start.month)
    if moratorium > months_left:
        errors["moratorium"] = f"moratorium runs past the last supported date ({date.max.isoformat()})"
    elif moratorium + (periods - 1) * months_per_period(frequency) > months_left:
        errors["tenure"] = f"tenure runs past the last supported date ({date.max.isoformat()})"


def _check_payment_range(
    principal: Decimal, rate: Decimal, periods: int, frequency: Frequency, errors: Dict[str, str]
) -> None:
    """Reject amounts whose level payment cannot be represented."""
    rate_per_period = periodic_rate(rate, frequency)
    try:
        rate_per_period * (1 + rate_per_period) ** periods
    except Overflow:
        errors["rate"] = "rate is too large to compute a payment"
        return
    try:
        payment = calculate_level_payment(principal, rate_per_period, periods)
        principal * rate_per_period
        payment * periods
    except Overflow:
        errors["principal"] = "principal is too large to compute a payment"


def validate_parameters(raw: Mapping[str, object]) -> LoanParameters:
    """Validate raw loan inputs and build :class:`LoanParameters`.

    Parameters
    ----------
    raw: Mapping[str, object]
        Field values keyed by ``principal``, ``rate``, ``tenure``,
        ``frequency``, ``moratorium`` and ``start_date``. Values may be
        strings or numbers. A blank ``moratorium`` means zero and a blank
        ``frequency`` means monthly.

    Returns
    -------
    LoanParameters
        The validated, immutable parameters.

    Raises
    ------
    ValidationError
        When one or more fields are invalid. ``errors`` holds one message per
        invalid field.
    """
    errors: Dict[str, str] = {}

    principal = _number(raw, "principal", errors)
    if principal is not None and principal <= 0:
        errors["principal"] = "principal must be > 0"

    tenure = _number(raw, "tenure", errors)
    if tenure is not None and tenure <= 0:
        errors["tenure"] = "tenure must be > 0"

    rate = _number(raw, "rate", errors)
    if rate is not None and rate < 0:
        errors["rate"] = "rate must be ≥ 0"

    moratorium: Optional[int] = 0
    if not _blank(raw.get("moratorium")):
        months = _number(raw, "moratorium", errors)
        if months is None:
            moratorium = None
        elif months < 0:
            errors["moratorium"] = "moratorium must be ≥ 0"
        elif months != months.to_integral_value():
            errors["moratorium"] = "moratorium must be a whole number of months"
        else:
            moratorium = int(months)

    frequency = _frequency(raw, errors)
    start_date = _start_date(raw, errors)

    # A tenure that does not cover a whole number of periods has no
    # meaningful last payment, so it is rejected rather than truncated.
    if "tenure" not in errors and tenure is not None and frequency is not None:
        periods = tenure * PERIODS_PER_YEAR[frequency]
        if periods != periods.to_integral_value():
            errors["tenure"] = f"tenure must cover a whole number of periods at {frequency.value} frequency"

    if not errors:
        _check_calendar_range(start_date, moratorium, int(periods), frequency, errors)
    if not errors:
        _check_payment_range(principal, rate, int(periods), frequency, errors)

    if errors:
        logger.info("Rejected loan parameters: %s", errors)
        raise ValidationError(errors)

    return LoanParameters(
        principal=principal,
        annual_rate=rate,
        tenure_years=tenure,
        frequency=frequency,
        moratorium_months=moratorium,
        start_date=start_date,
    )
