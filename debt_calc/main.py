"""Command-line interface for the debt calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can solve the interest rate implied by a fixed-installment
loan, print or export its amortization schedule, and split a single payment
into interest and capital. Results can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .config import MAX_PRINTED_ROWS, PERIODS_PER_YEAR, load_currency_places, load_solver_settings
from .data_models import AmortizationRow, DebtSnapshot, LoanParameters, PaymentMode, ScheduleSummary
from .engine import allocate_against, generate_schedule
from .exceptions import DebtCalcError
from .formatter import print_allocation, print_rate, print_schedule, print_summary
from .solver import require_periodic_rate
from .summary import summarize_schedule
from .utils import (
    annual_to_periodic,
    decimal_from_str,
    effective_annual_rate,
    percent_to_fraction,
)

logger = logging.getLogger(__name__)


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000"), thousands separators ("15,000,000")
    and shorthand with ``k``/``m`` suffixes (e.g. "761k" meaning 761_000).
    """
    value = value.strip().lower()
    value = value.replace(",", "").replace("_", "")
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    try:
        return decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def parse_rate_percent(value: str) -> Decimal:
    """Parse a percentage string (e.g. "1.73" or "1.73%") into a fraction."""
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        return percent_to_fraction(decimal_from_str(value))
    except ValueError:
        raise click.BadParameter(f"Invalid percentage: {value}")


def build_loan_from_options(principal: str, installments: int, installment_amount: str) -> LoanParameters:
    return LoanParameters(
        principal=parse_amount(principal),
        installment_count=installments,
        installment_amount=parse_amount(installment_amount),
    )


def _resolve_places(places: Optional[int]) -> int:
    if places is not None:
        return places
    try:
        return load_currency_places()
    except DebtCalcError as exc:
        raise click.ClickException(str(exc))


def _solve(loan: LoanParameters) -> float:
    return require_periodic_rate(
        loan.principal,
        loan.installment_count,
        loan.installment_amount,
        load_solver_settings(),
    )


def rate_payload(periodic_rate: float) -> Dict[str, float]:
    """Describe a periodic rate as a fraction and as percentages."""
    return {
        "periodic_rate": periodic_rate,
        "periodic_rate_percent": periodic_rate * 100,
        "annual_rate_percent": periodic_rate * PERIODS_PER_YEAR * 100,
        "effective_annual_rate_percent": effective_annual_rate(periodic_rate) * 100,
    }


def serialize_schedule(schedule: List[AmortizationRow]) -> List[Dict[str, Any]]:
    return [
        {
            "period": row.period,
            "payment": float(row.payment),
            "interest": float(row.interest_portion),
            "capital": float(row.capital_portion),
            "balance": float(row.remaining_balance),
        }
        for row in schedule
    ]


def serialize_summary(summary: ScheduleSummary) -> Dict[str, Any]:
    return {
        "periods": summary.periods,
        "total_paid": float(summary.total_paid),
        "capital_paid": float(summary.capital_paid),
        "interest_paid": float(summary.interest_paid),
        "remaining_balance": float(summary.remaining_balance),
        "negative_amortization_periods": list(summary.negative_amortization_periods),
    }


def export_to_json(path: Path, data: Dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[AmortizationRow]) -> None:
    """Export schedule rows to a CSV file at full precision."""
    header = ["Period", "Payment", "Interest", "Capital", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in schedule:
            writer.writerow(
                [
                    row.period,
                    float(row.payment),
                    float(row.interest_portion),
                    float(row.capital_portion),
                    float(row.remaining_balance),
                ]
            )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log solver iterations")
def cli(verbose: bool) -> None:
    """A command-line calculator for fixed-installment debts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Amount borrowed")
@click.option("--installments", "-n", "installments", required=True, type=int, help="Number of installments")
@click.option("--installment-amount", "-a", "installment_amount", required=True, help="Amount of each installment")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def rate(principal: str, installments: int, installment_amount: str, output: Optional[str]) -> None:
    """Solve the periodic interest rate implied by a loan's installments."""
    loan = build_loan_from_options(principal, installments, installment_amount)
    try:
        periodic_rate = _solve(loan)
    except DebtCalcError as exc:
        raise click.ClickException(str(exc))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Rate export must use .json extension")
        export_to_json(path, rate_payload(periodic_rate))
        click.echo(f"Rate exported to {path}")
    else:
        print_rate(periodic_rate)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Amount borrowed")
@click.option("--installments", "-n", "installments", required=True, type=int, help="Number of installments")
@click.option("--installment-amount", "-a", "installment_amount", required=True, help="Amount of each installment")
@click.option("--rate", "-r", "rate_percent", help="Periodic rate in percent; solved from the installments when omitted")
@click.option("--status-after", "status_after", type=int, help="Also show totals after this many payments")
@click.option("--places", "places", type=click.IntRange(min=0), help="Decimal places for printed amounts")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    installments: int,
    installment_amount: str,
    rate_percent: Optional[str],
    status_after: Optional[int],
    places: Optional[int],
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    loan = build_loan_from_options(principal, installments, installment_amount)
    places = _resolve_places(places)
    try:
        if rate_percent is not None:
            periodic_rate = parse_rate_percent(rate_percent)
        else:
            periodic_rate = _solve(loan)
        rows = generate_schedule(
            loan.principal, periodic_rate, loan.installment_count, loan.installment_amount
        )
        totals = summarize_schedule(rows, loan.principal)
        status = summarize_schedule(rows, loan.principal, status_after) if status_after is not None else None
    except DebtCalcError as exc:
        raise click.ClickException(str(exc))

    if totals.negative_amortization_periods:
        logger.warning(
            "Negative amortization in %d of %d periods",
            len(totals.negative_amortization_periods),
            len(rows),
        )

    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            data: Dict[str, Any] = {
                "rate": rate_payload(float(periodic_rate)),
                "summary": serialize_summary(totals),
                "schedule": serialize_schedule(rows),
            }
            if status is not None:
                data["status"] = serialize_summary(status)
            export_to_json(path, data)
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, rows)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        return

    print_rate(float(periodic_rate))
    print_summary(totals, places)
    if status is not None:
        print_summary(status, places, title=f"Status after {status.periods} payments")
    if len(rows) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        print_schedule(rows[:MAX_PRINTED_ROWS], places)
    else:
        print_schedule(rows, places)


@cli.command()
@click.option("--balance", "-b", "balance", required=True, help="Outstanding balance of the debt")
@click.option("--rate", "-r", "rate_percent", default="0", show_default=True, help="Interest rate in percent")
@click.option("--annual", is_flag=True, help="Treat --rate as a stated annual rate")
@click.option("--payment", "-x", "payment", required=True, help="Amount paid")
@click.option(
    "--mode",
    "mode",
    type=click.Choice([m.value for m in PaymentMode]),
    default=PaymentMode.FIXED_INSTALLMENT.value,
    show_default=True,
    help="How the payment is booked",
)
@click.option("--places", "places", type=click.IntRange(min=0), help="Decimal places interest is rounded to")
def allocate(
    balance: str,
    rate_percent: str,
    annual: bool,
    payment: str,
    mode: str,
    places: Optional[int],
) -> None:
    """Split a payment into interest and capital."""
    places = _resolve_places(places)
    periodic_rate = parse_rate_percent(rate_percent)
    if annual:
        periodic_rate = annual_to_periodic(periodic_rate)
    snapshot = DebtSnapshot(outstanding_balance=parse_amount(balance), periodic_rate=periodic_rate)
    try:
        allocation = allocate_against(snapshot, parse_amount(payment), PaymentMode(mode), places)
    except DebtCalcError as exc:
        raise click.ClickException(str(exc))
    print_allocation(allocation, places)


if __name__ == "__main__":
    cli()
