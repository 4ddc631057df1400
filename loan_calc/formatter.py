"""Output helpers for the loan calculator.

This module provides simple functions to render amortization schedules and
summaries in a tabular text format. We rely only on built‑in printing and
string formatting.
"""

from __future__ import annotations

from typing import Dict, Iterable

from .data_models import Period
from .export import SCHEDULE_HEADER, schedule_rows


def print_summary(summary: Dict[str, object]) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {summary['principal']:.2f}")
    print(f"Annual rate        : {summary['annual_rate']:.2f}%")
    print(f"Frequency          : {summary['frequency']}")
    print(f"Payment (EMI)      : {summary['payment']:.2f}")
    print(f"Number of payments : {summary['periods']}")
    print(f"Total interest     : {summary['total_interest']:.2f}")
    print(f"Total paid         : {summary['total_payment']:.2f}")
    print(f"First payment      : {summary['first_payment_date']}")
    print(f"Last payment       : {summary['last_payment_date']}")
    print("-" * 72)


def print_schedule(schedule: Iterable[Period]) -> None:
    """Print the amortization schedule as a simple tab separated table."""
    periods = list(schedule)
    print("\t".join(["Period"] + SCHEDULE_HEADER))
    for period, row in zip(periods, schedule_rows(periods)):
        print("\t".join([str(period.number)] + row))


def print_comparison(s1: Dict[str, object], s2: Dict[str, object]) -> None:
    """Print a comparison of two loan summaries side by side.

    The difference column is scenario2 - scenario1, so a negative value means
    the second scenario is cheaper or shorter.
    """
    print("Comparison")
    print("=" * 72)
    keys = [
        "payment",
        "total_payment",
        "total_interest",
        "periods",
    ]
    print(f"{'Metric':20s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key in keys:
        v1 = s1.get(key)
        v2 = s2.get(key)
        diff = v2 - v1
        # Counts print as integers, amounts with two decimals.
        fmt = "15d" if isinstance(v1, int) and isinstance(v2, int) else "15.2f"
        print(f"{key:20s} {v1:{fmt}} {v2:{fmt}} {diff:{fmt}}")
    print("=" * 72)
