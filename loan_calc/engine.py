"""Core calculation engine for the loan calculator.

This module implements the financial logic required to build level payment
(EMI) amortization schedules for monthly, quarterly, semi-annual and annual
repayment frequencies, with an optional moratorium that delays the first
payment. Results are returned as a list of ``Period`` objects; a separate
helper aggregates them into a summary dictionary.

The computation is pure: it performs no I/O and keeps all running state
local to each call.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import Dict

from .data_models import PERIODS_PER_YEAR, Frequency, LoanParameters, Period, Schedule
from .utils import add_months

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def periods_per_year(frequency: Frequency) -> int:
    """Return the number of repayments per year for ``frequency``."""
    try:
        return PERIODS_PER_YEAR[frequency]
    except KeyError:
        raise ValueError(f"Unsupported repayment frequency: {frequency!r}") from None


def months_per_period(frequency: Frequency) -> int:
    """Return the calendar months between two consecutive repayments."""
    return 12 // periods_per_year(frequency)


def total_periods(params: LoanParameters) -> int:
    """Return the number of repayments covered by the loan tenure.

    Raises ``ValueError`` when the tenure does not span a whole number of
    periods. The validator rejects such input before it gets here.
    """
    periods = params.tenure_years * periods_per_year(params.frequency)
    if periods != periods.to_integral_value() or periods <= 0:
        raise ValueError(
            f"Tenure of {params.tenure_years} years is not a whole number of "
            f"{params.frequency.value} periods"
        )
    return int(periods)


def periodic_rate(annual_rate: Decimal, frequency: Frequency) -> Decimal:
    """Convert an annual rate in percent to the rate of a single period."""
    return annual_rate / Decimal(100) / Decimal(periods_per_year(frequency))


def calculate_level_payment(principal: Decimal, rate_per_period: Decimal, term: int) -> Decimal:
    """Return the level (EMI) payment that amortizes ``principal``.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the periodic interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if term <= 0:
        raise ValueError("Term must be positive")
    if rate_per_period == 0:
        return principal / Decimal(term)
    factor = (1 + rate_per_period) ** term
    return principal * (rate_per_period * factor) / (factor - 1)


def compute_schedule(params: LoanParameters) -> Schedule:
    """Compute the amortization schedule for validated loan parameters.

    Parameters
    ----------
    params: LoanParameters
        Parameters returned by :func:`loan_calc.validation.validate_parameters`.

    Returns
    -------
    Schedule
        One ``Period`` per repayment, in date order. The first payment falls
        on the disbursement date advanced by the moratorium; later payments
        follow at the frequency's month step. Each date is computed from the
        disbursement date so that month-end clamping (Jan 31 -> Feb 29) does
        not carry over into later months.
    """
    n = total_periods(params)
    rate = periodic_rate(params.annual_rate, params.frequency)
    payment = calculate_level_payment(params.principal, rate, n)
    step = months_per_period(params.frequency)

    logger.debug(
        "Computing %d %s periods: principal=%s rate=%s payment=%s",
        n,
        params.frequency.value,
        params.principal,
        rate,
        payment,
    )

    schedule: Schedule = []
    balance = params.principal
    for index in range(n):
        interest = balance * rate
        principal_payment = payment - interest
        balance = balance - principal_payment
        schedule.append(
            Period(
                number=index + 1,
                date=add_months(params.start_date, params.moratorium_months + index * step),
                payment=payment,
                interest=interest,
                principal=principal_payment,
                balance_after=max(ZERO, balance),
            )
        )
    return schedule


def summarize_schedule(params: LoanParameters, schedule: Schedule) -> Dict[str, object]:
    """Aggregate a schedule into summary metrics.

    The returned dictionary is JSON serializable: amounts are floats and
    dates are ISO strings.
    """
    total_payment = sum((p.payment for p in schedule), ZERO)
    total_interest = sum((p.interest for p in schedule), ZERO)
    total_principal = sum((p.principal for p in schedule), ZERO)
    return {
        "principal": float(params.principal),
        "annual_rate": float(params.annual_rate),
        "frequency": params.frequency.value,
        "periodic_rate": float(periodic_rate(params.annual_rate, params.frequency)),
        "payment": float(schedule[0].payment) if schedule else 0.0,
        "periods": len(schedule),
        "total_payment": float(total_payment),
        "total_interest": float(total_interest),
        "total_principal": float(total_principal),
        "first_payment_date": schedule[0].date.isoformat() if schedule else None,
        "last_payment_date": schedule[-1].date.isoformat() if schedule else None,
    }
