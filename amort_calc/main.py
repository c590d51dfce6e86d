"""Command-line interface for the amortization calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full amortization schedules or view summaries.
Results can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import click

from .data_models import Cadence, LoanRequest, ScheduleResult, ScheduleRow
from .engine import build_schedule, summarize
from .formatter import print_schedule, print_summary
from .utils import decimal_from_str, parse_start_date, validate_request

MAX_PRINTED_ROWS = 120


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def build_request_from_options(
    principal: str,
    rate: float,
    term: int,
    extra: Optional[str] = None,
    cadence: str = "monthly",
    start_date: Optional[str] = None,
) -> LoanRequest:
    """Turn raw option values into a validated ``LoanRequest``.

    Raises ``click.BadParameter`` for anything the engine must not see.
    """
    try:
        start_dt = parse_start_date(start_date) if start_date else None
        request = LoanRequest(
            principal=decimal_from_str(str(parse_amount(principal))),
            annual_rate=decimal_from_str(str(rate)),
            term_years=term,
            extra_payment=decimal_from_str(str(parse_amount(extra)) if extra else "0"),
            start_date=start_dt,
            cadence=Cadence(cadence.lower()),
        )
        validate_request(request)
    except (ValueError, ArithmeticError) as exc:
        raise click.BadParameter(str(exc))
    return request


def run_schedule(request: LoanRequest) -> Tuple[ScheduleResult, Dict[str, Any]]:
    """Build the schedule and its summary, reporting numeric failures as bad input."""
    try:
        result = build_schedule(request)
        return result, summarize(request, result)
    except ArithmeticError as exc:
        raise click.BadParameter(f"Loan amounts are too large to compute ({type(exc).__name__})")


def row_to_dict(row: ScheduleRow) -> Dict[str, Any]:
    return {
        "period": row.period,
        "date": row.date,
        "payment": float(row.payment),
        "interest": float(row.interest),
        "principal": float(row.principal),
        "extra": float(row.extra),
        "balance": float(row.balance),
    }


def export_to_json(path: Path, rows: Iterable[ScheduleRow], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": [row_to_dict(r) for r in rows]}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, rows: Iterable[ScheduleRow]) -> None:
    """Export schedule to a CSV file."""
    header = ["Period", "Date", "Payment", "Interest", "Principal", "Extra", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for r in rows:
            writer.writerow(
                [
                    r.period,
                    r.date or "",
                    float(r.payment),
                    float(r.interest),
                    float(r.principal),
                    float(r.extra),
                    float(r.balance),
                ]
            )


def loan_options(func):
    """Attach the loan input options shared by every command."""
    options: List[Any] = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=int, help="Loan term in years"),
        click.option("--extra", "-e", "extra", help="Extra principal paid every period"),
        click.option(
            "--cadence",
            "cadence",
            type=click.Choice([c.value for c in Cadence]),
            default=Cadence.MONTHLY.value,
            help="Payment frequency",
        ),
        click.option(
            "--start-date",
            "-s",
            "start_date",
            help="First payment date (YYYY-MM, or YYYY-MM-DD for biweekly). Omit for unlabeled periods.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """A command-line amortization calculator for fixed-rate loans."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    term: int,
    extra: Optional[str],
    cadence: str,
    start_date: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    request = build_request_from_options(principal, rate, term, extra, cadence, start_date)
    result, summary_data = run_schedule(request)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result.rows, summary_data)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result.rows)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(summary_data)
    # Limit schedule length printed to avoid flooding the terminal
    if len(result.rows) > MAX_PRINTED_ROWS:
        click.echo(
            f"Schedule has {len(result.rows)} rows; showing first {MAX_PRINTED_ROWS} rows."
        )
        print_schedule(result.rows[:MAX_PRINTED_ROWS])
    else:
        print_schedule(result.rows)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: float,
    term: int,
    extra: Optional[str],
    cadence: str,
    start_date: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    request = build_request_from_options(principal, rate, term, extra, cadence, start_date)
    _, summary_data = run_schedule(request)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


if __name__ == "__main__":
    cli()
