"""Command‑line interface for the loan calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute full amortization schedules, view summaries or
compare two loan scenarios. Results can be printed to the terminal or
exported to JSON, CSV or PDF files.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from .data_models import FREQUENCY_CHOICES, LoanParameters, Schedule
from .engine import compute_schedule, summarize_schedule
from .exceptions import ValidationError
from .export import export_to_csv, export_to_json, export_to_pdf
from .formatter import print_comparison, print_schedule, print_summary
from .validation import validate_parameters

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_params_from_options(
    principal: str,
    rate: str,
    tenure: str,
    frequency: str,
    moratorium: Optional[str],
    start_date: str,
) -> LoanParameters:
    """Validate CLI option values, reporting every invalid field at once."""
    raw = {
        "principal": principal,
        "rate": rate,
        "tenure": tenure,
        "frequency": frequency,
        "moratorium": moratorium,
        "start_date": start_date,
    }
    try:
        return validate_parameters(raw)
    except ValidationError as exc:
        lines = [f"  --{field.replace('_', '-')}: {msg}" for field, msg in exc.errors.items()]
        raise click.ClickException("Invalid loan parameters:\n" + "\n".join(lines))


def run_calculation(params: LoanParameters) -> Tuple[Schedule, Dict[str, Any]]:
    schedule_entries = compute_schedule(params)
    logger.debug("Computed schedule with %d periods", len(schedule_entries))
    return schedule_entries, summarize_schedule(params, schedule_entries)


def loan_options(func):
    """Attach the loan parameter options shared by all commands."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (accepts 500k, 1.2m)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--tenure", "-t", "tenure", required=True, help="Loan tenure in years"),
        click.option(
            "--frequency",
            "-f",
            "frequency",
            type=click.Choice(FREQUENCY_CHOICES),
            default="monthly",
            show_default=True,
            help="Repayment frequency",
        ),
        click.option("--moratorium", "-m", "moratorium", default="0", show_default=True, help="Moratorium in months"),
        click.option("--start-date", "-s", "start_date", required=True, help="Disbursement date (YYYY-MM-DD)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=lambda: os.environ.get("LOAN_CALC_LOG_LEVEL", "WARNING").upper(),
    help="Logging verbosity (defaults to $LOAN_CALC_LOG_LEVEL or WARNING)",
)
def cli(log_level: str) -> None:
    """A command‑line loan repayment schedule calculator."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json, .csv or .pdf)")
@click.option("--max-rows", "max_rows", type=click.IntRange(min=1), default=120, show_default=True, help="Rows to print")
def schedule(
    principal: str,
    rate: str,
    tenure: str,
    frequency: str,
    moratorium: str,
    start_date: str,
    output: Optional[str],
    max_rows: int,
) -> None:
    """Compute and print the full amortization schedule."""
    params = build_params_from_options(principal, rate, tenure, frequency, moratorium, start_date)
    schedule_entries, summary = run_calculation(params)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, schedule_entries, summary)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, schedule_entries)
        elif path.suffix.lower() == ".pdf":
            export_to_pdf(path, schedule_entries)
        else:
            raise click.BadParameter("Unsupported output format; use .json, .csv or .pdf", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(summary)
    # Limit schedule length printed to avoid flooding the terminal
    if len(schedule_entries) > max_rows:
        click.echo(f"Schedule has {len(schedule_entries)} rows; showing first {max_rows} rows.")
        print_schedule(schedule_entries[:max_rows])
    else:
        print_schedule(schedule_entries)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: str,
    tenure: str,
    frequency: str,
    moratorium: str,
    start_date: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    params = build_params_from_options(principal, rate, tenure, frequency, moratorium, start_date)
    _, summary_data = run_calculation(params)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


def parse_scenario(opts: str) -> LoanParameters:
    """Parse a quoted scenario option string using the ``schedule`` options."""
    tokens = shlex.split(opts)
    with schedule.make_context("scenario", tokens) as ctx:
        p = ctx.params
    return build_params_from_options(
        p["principal"], p["rate"], p["tenure"], p["frequency"], p["moratorium"], p["start_date"]
    )


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        loan-calc compare --scenario1 "-p 500k -r 8.5 -t 20 -s 2024-01-01"
        --scenario2 "-p 500k -r 8.5 -t 15 -s 2024-01-01"
    """
    _, summary1 = run_calculation(parse_scenario(scenario1))
    _, summary2 = run_calculation(parse_scenario(scenario2))
    print_comparison(summary1, summary2)


if __name__ == "__main__":
    cli()
