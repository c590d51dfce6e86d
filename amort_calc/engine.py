"""Core calculation engine for the amortization calculator.

This module implements the fixed-payment (annuity) formula and the period by
period amortization loop built on top of it. The loop supports a recurring
extra principal payment, monthly or biweekly cadences and optional date
labels. Results are returned as an immutable ``ScheduleResult``; ``summarize``
turns one into a flat dictionary for display and export.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal, getcontext
from typing import Dict, List

from .data_models import LoanRequest, ScheduleResult, ScheduleRow, ScheduleTotals

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Balances at or below this are treated as paid off.
PAYOFF_EPSILON = Decimal("0.00001")

# Iterations allowed past the nominal number of periods before giving up.
EXTRA_ITERATIONS = 1000


def period_rate(annual_rate: Decimal, periods_per_year: int) -> Decimal:
    """Return the interest rate of one period for an annual rate in percent."""
    return (Decimal(annual_rate) / Decimal(100)) / Decimal(periods_per_year)


def compute_payment(
    principal: Decimal, annual_rate: Decimal, term_years: int, periods_per_year: int
) -> Decimal:
    """Return the fixed periodic payment that repays ``principal`` in full.

    The formula is:

        payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    where ``P`` is the principal, ``r`` is the per-period interest rate
    (``annual_rate / 100 / periods_per_year``) and ``n`` is the number of
    payments (``term_years * periods_per_year``). When the interest rate is
    zero, the payment simplifies to ``P / n``.
    """
    n = term_years * periods_per_year
    if n <= 0:
        raise ValueError("Number of periods must be positive")
    principal = Decimal(principal)
    r = period_rate(annual_rate, periods_per_year)
    if r == 0:
        return principal / Decimal(n)
    factor = (1 + r) ** n
    return principal * (r * factor) / (factor - 1)


def build_schedule(request: LoanRequest) -> ScheduleResult:
    """Compute the amortization schedule for a validated loan request.

    The scheduled payment is computed once and held constant. Each period
    accrues interest on the outstanding balance, applies the remainder of the
    payment plus ``extra_payment`` to principal and records a row. The period
    whose principal reduction would overshoot the balance pays off exactly
    what is left.

    The loop stops once the balance drops to ``PAYOFF_EPSILON`` or below. It
    never runs more than ``EXTRA_ITERATIONS`` past the nominal number of
    periods; if that cap is hit first the result is flagged ``truncated``.

    The request is not validated here; see
    :func:`amort_calc.utils.validate_request`.
    """
    cadence = request.cadence
    periods_per_year = cadence.periods_per_year
    base_payment = compute_payment(
        request.principal, request.annual_rate, request.term_years, periods_per_year
    )
    rate = period_rate(request.annual_rate, periods_per_year)
    extra = Decimal(request.extra_payment)
    max_periods = request.term_years * periods_per_year + EXTRA_ITERATIONS
    logger.debug(
        "Base %s payment %s over %s periods",
        cadence.value, base_payment, request.term_years * periods_per_year,
    )

    balance = Decimal(request.principal)
    total_interest = Decimal("0")
    total_principal = Decimal("0")
    total_extra = Decimal("0")
    total_payment = Decimal("0")
    rows: List[ScheduleRow] = []

    period = 1
    while balance > 0 and period <= max_periods:
        interest = balance * rate
        principal_payment = base_payment - interest
        if principal_payment + extra > balance:
            # Final period: pay off exactly the remaining balance
            principal_payment = balance
        payment = principal_payment + interest
        balance = max(Decimal("0"), balance - principal_payment - extra)

        total_interest += interest
        total_principal += principal_payment
        total_extra += extra
        total_payment += payment + extra

        label = None
        if request.start_date is not None:
            label = cadence.label_for(request.start_date, period)

        rows.append(
            ScheduleRow(
                period=period,
                date=label,
                payment=payment,
                interest=interest,
                principal=principal_payment,
                extra=extra,
                balance=balance,
            )
        )

        if balance <= PAYOFF_EPSILON:
            break
        period += 1

    truncated = balance > PAYOFF_EPSILON
    if truncated:
        logger.warning(
            "Schedule stopped after %s periods with %s still outstanding",
            len(rows), balance,
        )

    return ScheduleResult(
        base_payment=base_payment,
        rows=tuple(rows),
        totals=ScheduleTotals(
            interest=total_interest,
            principal=total_principal,
            extra=total_extra,
            payment=total_payment,
        ),
        truncated=truncated,
    )


def summarize(request: LoanRequest, result: ScheduleResult) -> Dict[str, object]:
    """Return the aggregate metrics of ``result`` as a flat dictionary.

    When the request carries an extra payment, a ``comparison`` entry reports
    the interest and periods saved against the same loan without it.
    """
    summary: Dict[str, object] = {
        "principal": float(request.principal),
        "cadence": request.cadence.label,
        "base_payment": float(result.base_payment),
        "total_interest": float(result.totals.interest),
        "total_principal": float(result.totals.principal),
        "total_extra": float(result.totals.extra),
        "total_payment": float(result.totals.payment),
        "scheduled_periods": request.term_years * request.cadence.periods_per_year,
        "periods": result.periods,
        "payoff": result.payoff_label,
        "truncated": result.truncated,
    }
    if request.extra_payment > 0:
        baseline = build_schedule(replace(request, extra_payment=Decimal("0")))
        summary["comparison"] = {
            "baseline_total_interest": float(baseline.totals.interest),
            "interest_saved": float(baseline.totals.interest - result.totals.interest),
            "baseline_periods": baseline.periods,
            "periods_saved": baseline.periods - result.periods,
        }
    return summary
