"""Export helpers for amortization schedules.

Schedules can be written as CSV or as a PDF table (the table shown to
users, with medium dates and 2-decimal amounts), as JSON (machine readable,
together with the summary) or turned into the series used by the balance
and payment breakdown charts.
"""

from __future__ import annotations

import csv
import json
from datetime import date
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, List, TextIO, Union

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

from .data_models import Period

SCHEDULE_HEADER = ["Date", "Payment", "Interest", "Principal", "Balance"]
PDF_TITLE = "Loan Repayment Schedule"
PDF_ROWS_PER_PAGE = 40


def format_medium_date(value: date) -> str:
    """Format a date as a medium date string, e.g. ``Jan 1, 2024``."""
    return f"{value:%b} {value.day}, {value.year}"


def format_money(value) -> str:
    return f"{value:.2f}"


def schedule_rows(schedule: Iterable[Period]) -> List[List[str]]:
    """Return the schedule as display rows matching ``SCHEDULE_HEADER``."""
    return [
        [
            format_medium_date(p.date),
            format_money(p.payment),
            format_money(p.interest),
            format_money(p.principal),
            format_money(p.balance_after),
        ]
        for p in schedule
    ]


def write_csv(stream: TextIO, schedule: Iterable[Period]) -> None:
    """Write the schedule table, header included, to an open text stream."""
    writer = csv.writer(stream)
    writer.writerow(SCHEDULE_HEADER)
    writer.writerows(schedule_rows(schedule))


def export_to_csv(path: Path, schedule: Iterable[Period]) -> None:
    """Export schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        write_csv(f, schedule)


def serialize_schedule(schedule: Iterable[Period]) -> List[Dict[str, Any]]:
    """Convert schedule periods into JSON-serialisable dictionaries."""
    return [
        {
            "period": p.number,
            "date": p.date.isoformat(),
            "payment": float(p.payment),
            "interest": float(p.interest),
            "principal": float(p.principal),
            "balance": float(p.balance_after),
        }
        for p in schedule
    ]


def export_to_json(path: Path, schedule: Iterable[Period], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": serialize_schedule(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def chart_series(schedule: Iterable[Period]) -> Dict[str, List[Any]]:
    """Build chart data from a schedule.

    ``balance`` and ``payment`` feed the outstanding balance area chart,
    ``principal`` and ``interest`` the stacked per-period breakdown. All
    series share ``labels``.
    """
    periods = list(schedule)
    return {
        "labels": [format_medium_date(p.date) for p in periods],
        "balance": [round(float(p.balance_after), 2) for p in periods],
        "payment": [round(float(p.payment), 2) for p in periods],
        "principal": [round(float(p.principal), 2) for p in periods],
        "interest": [round(float(p.interest), 2) for p in periods],
    }


def write_pdf(target: Union[Path, BinaryIO], schedule: Iterable[Period]) -> None:
    """Write the schedule table as an A4 PDF, one figure per page.

    ``target`` is a path or a binary stream. The title is printed on the
    first page and the column header is repeated on every page.
    """
    rows = schedule_rows(schedule)
    pages = [rows[i : i + PDF_ROWS_PER_PAGE] for i in range(0, len(rows), PDF_ROWS_PER_PAGE)] or [[]]
    with PdfPages(target) as pdf:
        for number, page_rows in enumerate(pages):
            fig = Figure(figsize=(8.27, 11.69))
            ax = fig.add_subplot()
            ax.axis("off")
            if number == 0:
                ax.set_title(PDF_TITLE, loc="left", fontsize=14)
            if page_rows:
                table = ax.table(cellText=page_rows, colLabels=SCHEDULE_HEADER, loc="upper center")
                table.auto_set_font_size(False)
                table.set_fontsize(8)
                table.scale(1, 1.2)
            pdf.savefig(fig)


def export_to_pdf(path: Path, schedule: Iterable[Period]) -> None:
    """Export schedule to a PDF file."""
    write_pdf(path, schedule)
