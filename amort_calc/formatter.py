"""Output helpers for the amortization calculator.

This module provides simple functions to render amortization schedules and
summaries in a tabular text format. We rely only on built-in printing and
string formatting.
"""

from __future__ import annotations

from typing import Dict, Iterable

from .data_models import ScheduleRow

NO_DATE = "—"


def print_summary(summary: Dict[str, object]) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Period             : {summary['cadence']}")
    print(f"Principal          : {summary['principal']:.2f}")
    print(f"Payment            : {summary['base_payment']:.2f}")
    print(f"Total interest     : {summary['total_interest']:.2f}")
    if summary.get('total_extra', 0):
        print(f"Total extra        : {summary['total_extra']:.2f}")
    print(f"Total paid         : {summary['total_payment']:.2f}")
    print(f"Payments made      : {summary['periods']} of {summary['scheduled_periods']}")
    print(f"Payoff             : {summary['payoff']}")
    comparison = summary.get('comparison')
    if comparison:
        print(f"Baseline interest  : {comparison['baseline_total_interest']:.2f}")
        print(f"Interest saved     : {comparison['interest_saved']:.2f}")
        if comparison.get('periods_saved'):
            print(f"Term reduction     : {comparison['periods_saved']} periods")
    if summary.get('truncated'):
        print("Warning            : schedule stopped before the loan was paid off")
    print("-" * 72)


def print_schedule(rows: Iterable[ScheduleRow]) -> None:
    """Print the amortization schedule as a simple table.

    Rows without a date label show a dash in the ``Date`` column.
    """
    headers = [
        "Period",
        "Date",
        "Payment",
        "Interest",
        "Principal",
        "Extra",
        "Balance",
    ]
    print("\t".join(headers))
    for row in rows:
        cells = [
            str(row.period),
            row.date or NO_DATE,
            f"{row.payment:.2f}",
            f"{row.interest:.2f}",
            f"{row.principal:.2f}",
            f"{row.extra:.2f}",
            f"{row.balance:.2f}",
        ]
        print("\t".join(cells))
