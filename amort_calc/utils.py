"""Utility functions for the amortization calculator.

This module provides helpers for parsing user input into Python data types,
for handling dates (adding months, normalizing year-month strings to
``datetime.date`` instances) and for checking a loan request before it is
handed to the engine.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, getcontext
import calendar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .data_models import LoanRequest

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

MAX_TERM_YEARS = 100
MAX_ANNUAL_RATE = Decimal("100")  # percent


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Parameters
    ----------
    ym: str
        A string in the form ``"YYYY-MM"``. The day component, if present,
        will be ignored.

    Returns
    -------
    date
        A date object representing the first day of the specified month.

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.split("-")
        if len(parts) < 2:
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        return date(year, month, 1)
    except (ValueError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def parse_start_date(value: str) -> date:
    """Parse a first payment date given as ``YYYY-MM`` or ``YYYY-MM-DD``.

    A bare month anchors on its first day.
    """
    value = value.strip()
    if value.count("-") == 1:
        return parse_year_month(value)
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid start date: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def validate_request(request: LoanRequest) -> None:
    """Reject a loan request the engine cannot amortize.

    The engine itself trusts its inputs, so every caller runs this first.

    Raises
    ------
    ValueError
        If the principal or term is not positive, the rate or extra
        payment is negative, or the term or rate is above its upper bound.
    """
    if request.principal <= 0:
        raise ValueError("Principal must be positive")
    if request.annual_rate < 0:
        raise ValueError("Annual rate cannot be negative")
    if isinstance(request.term_years, bool) or not isinstance(request.term_years, int):
        raise ValueError("Term must be a whole number of years")
    if request.term_years <= 0:
        raise ValueError("Term must be positive")
    if request.term_years > MAX_TERM_YEARS:
        raise ValueError(f"Term cannot exceed {MAX_TERM_YEARS} years")
    if request.annual_rate > MAX_ANNUAL_RATE:
        raise ValueError(f"Annual rate cannot exceed {MAX_ANNUAL_RATE}%")
    if request.extra_payment < 0:
        raise ValueError("Extra payment cannot be negative")
