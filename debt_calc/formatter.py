"""Output helpers for the debt calculator.

This module renders solved rates, amortization schedules, schedule summaries
and payment allocations as plain text tables. Money is rounded to the
requested number of decimal places here and nowhere else.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .config import PERIODS_PER_YEAR
from .data_models import AmortizationRow, PaymentAllocation, ScheduleSummary
from .utils import effective_annual_rate, round_money


def _money(value, places: int) -> str:
    return f"{round_money(value, places):,.{places}f}"


def print_rate(rate: Optional[float]) -> None:
    """Print a periodic rate with its annual equivalents."""
    print("Interest rate")
    print("-" * 72)
    if rate is None:
        print("Periodic rate      : undetermined")
        print("-" * 72)
        return
    print(f"Periodic rate      : {rate * 100:.4f}%")
    print(f"Annual (nominal)   : {rate * PERIODS_PER_YEAR * 100:.4f}%")
    print(f"Annual (effective) : {effective_annual_rate(rate) * 100:.4f}%")
    print("-" * 72)


def print_summary(summary: ScheduleSummary, places: int, title: str = "Summary") -> None:
    """Print schedule totals in a human-readable format."""
    print(title)
    print("-" * 72)
    print(f"Payments counted   : {summary.periods}")
    print(f"Total paid         : {_money(summary.total_paid, places)}")
    print(f"Capital paid       : {_money(summary.capital_paid, places)}")
    print(f"Interest paid      : {_money(summary.interest_paid, places)}")
    print(f"Remaining debt     : {_money(summary.remaining_balance, places)}")
    if summary.negative_amortization_periods:
        periods = ", ".join(str(p) for p in summary.negative_amortization_periods)
        print(f"WARNING: installment does not cover interest in periods {periods}")
    print("-" * 72)


def print_schedule(schedule: Iterable[AmortizationRow], places: int) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Period", "Payment", "Interest", "Capital", "Balance"]
    print("\t".join(headers))
    for row in schedule:
        print(
            "\t".join(
                [
                    str(row.period),
                    _money(row.payment, places),
                    _money(row.interest_portion, places),
                    _money(row.capital_portion, places),
                    _money(row.remaining_balance, places),
                ]
            )
        )


def print_allocation(allocation: PaymentAllocation, places: int) -> None:
    print("Payment allocation")
    print("-" * 72)
    print(f"Interest           : {_money(allocation.interest_portion, places)}")
    print(f"Capital            : {_money(allocation.capital_portion, places)}")
    if allocation.unapplied:
        print(f"Unapplied (excess) : {_money(allocation.unapplied, places)}")
    print("-" * 72)
