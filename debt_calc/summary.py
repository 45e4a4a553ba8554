"""Aggregates over amortization schedules.

The schedule generator returns rows only; totals such as "capital and
interest paid after the first 15 of 36 installments" are computed here by
summing the leading rows.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from .data_models import AmortizationRow, ScheduleSummary
from .exceptions import InvalidInput
from .utils import Number, to_decimal


def negative_amortization_periods(schedule: Sequence[AmortizationRow]) -> List[int]:
    """Return the periods whose installment did not cover the interest."""
    return [row.period for row in schedule if row.capital_portion < 0]


def summarize_schedule(
    schedule: Sequence[AmortizationRow],
    principal: Number,
    through_period: Optional[int] = None,
) -> ScheduleSummary:
    """Sum the rows of ``schedule`` up to and including ``through_period``.

    ``remaining_balance`` is the principal minus the capital paid so far. With
    no ``through_period`` the whole schedule is summarized.
    """
    if through_period is None:
        through_period = len(schedule)
    if through_period < 0 or through_period > len(schedule):
        raise InvalidInput(
            "through_period", through_period, f"must be between 0 and {len(schedule)}"
        )
    rows = schedule[:through_period]
    interest_paid = sum((row.interest_portion for row in rows), Decimal("0"))
    capital_paid = sum((row.capital_portion for row in rows), Decimal("0"))
    total_paid = sum((row.payment for row in rows), Decimal("0"))
    return ScheduleSummary(
        periods=through_period,
        total_paid=total_paid,
        interest_paid=interest_paid,
        capital_paid=capital_paid,
        remaining_balance=to_decimal(principal, "principal") - capital_paid,
        negative_amortization_periods=tuple(negative_amortization_periods(rows)),
    )
