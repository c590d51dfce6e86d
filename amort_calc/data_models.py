"""Data models for the amortization calculator.

This module defines the value objects exchanged between the calculation engine
and its callers: the payment cadence, the loan request, individual schedule
rows and the overall result. All of them are frozen dataclasses so a computed
schedule cannot be mutated after the engine hands it back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from .utils import add_months


class Cadence(str, Enum):
    """How often payments are made."""

    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"  # every 14 days, not twice a month

    @property
    def periods_per_year(self) -> int:
        return {"monthly": 12, "biweekly": 26}[self.value]

    @property
    def label(self) -> str:
        return {"monthly": "Monthly", "biweekly": "Biweekly"}[self.value]

    def label_for(self, start: date, period: int) -> str:
        """Return the date label of the 1-based ``period`` counted from ``start``.

        Monthly labels are ``YYYY-MM`` and ignore the day of ``start``.
        Biweekly labels are ``YYYY-MM-DD``, 14 days apart.
        """
        if self is Cadence.MONTHLY:
            return add_months(start.replace(day=1), period - 1).strftime("%Y-%m")
        return (start + timedelta(days=14 * (period - 1))).strftime("%Y-%m-%d")


@dataclass(frozen=True)
class LoanRequest:
    """Validated inputs for a single schedule computation.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate: Decimal
        Annual nominal interest rate in percent (``Decimal("6.5")`` is 6.5 %).
    term_years: int
        Loan term in whole years.
    extra_payment: Decimal
        Additional principal paid every period on top of the scheduled payment.
    start_date: Optional[date]
        First payment date. When ``None`` the schedule rows are not labeled
        with dates. Monthly schedules only use its year and month.
    cadence: Cadence
        Payment frequency.
    """

    principal: Decimal
    annual_rate: Decimal
    term_years: int
    extra_payment: Decimal = Decimal("0")
    start_date: Optional[date] = None
    cadence: Cadence = Cadence.MONTHLY


@dataclass(frozen=True)
class ScheduleRow:
    """One period of the amortization schedule.

    ``payment`` is the scheduled part only (``principal + interest``); the
    extra principal of the period is reported separately in ``extra``.
    """

    period: int
    date: Optional[str]
    payment: Decimal
    interest: Decimal
    principal: Decimal
    extra: Decimal
    balance: Decimal


@dataclass(frozen=True)
class ScheduleTotals:
    interest: Decimal = Decimal("0")
    principal: Decimal = Decimal("0")
    extra: Decimal = Decimal("0")
    payment: Decimal = Decimal("0")  # scheduled payments plus extras


@dataclass(frozen=True)
class ScheduleResult:
    """The full output of :func:`amort_calc.engine.build_schedule`.

    ``truncated`` is set when the iteration cap stopped the schedule before
    the balance was paid off; in that case the last row still carries a
    positive balance.
    """

    base_payment: Decimal
    rows: Tuple[ScheduleRow, ...]
    totals: ScheduleTotals = field(default_factory=ScheduleTotals)
    truncated: bool = False

    @property
    def periods(self) -> int:
        return len(self.rows)

    @property
    def payoff_label(self) -> str:
        if self.truncated:
            return f"Not paid off after {len(self.rows)} periods"
        if self.rows and self.rows[-1].date:
            return self.rows[-1].date
        return f"After {len(self.rows)} periods"
