"""Data models for the loan calculator.

This module defines the repayment frequency enumeration, the validated loan
parameters and the individual schedule periods produced by the engine. The
dataclasses are frozen: parameters are built fresh from each submission and
schedules are immutable snapshots once computed.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List


class Frequency(str, Enum):
    """How often a repayment falls due.

    The string values are the ones accepted on the command line and in the
    web form.
    """

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi-annually"
    ANNUALLY = "annually"


PERIODS_PER_YEAR = {
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.SEMI_ANNUALLY: 2,
    Frequency.ANNUALLY: 1,
}

FREQUENCY_CHOICES = [f.value for f in Frequency]


@dataclass(frozen=True)
class LoanParameters:
    """Validated inputs of a single schedule computation.

    Attributes
    ----------
    principal: Decimal
        The amount disbursed. Always positive.
    annual_rate: Decimal
        Nominal annual interest rate in percent (``12`` means 12 %).
    tenure_years: Decimal
        Loan duration in years. Fractional values are allowed as long as they
        cover a whole number of repayment periods.
    frequency: Frequency
        Repayment frequency.
    moratorium_months: int
        Calendar months after disbursement before the first payment falls due.
    start_date: date
        The disbursement date; every payment date is derived from it.
    """

    principal: Decimal
    annual_rate: Decimal
    tenure_years: Decimal
    frequency: Frequency
    moratorium_months: int
    start_date: date


@dataclass(frozen=True)
class Period:
    """One repayment event of the amortization schedule.

    ``payment`` is the same for every period of a schedule. ``interest`` is
    charged on the balance entering the period and ``principal`` is the rest
    of the payment. ``balance_after`` is floored at zero.
    """

    number: int
    date: date
    payment: Decimal
    interest: Decimal
    principal: Decimal
    balance_after: Decimal


Schedule = List[Period]
