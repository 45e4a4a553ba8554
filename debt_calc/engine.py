"""Core calculation engine for the debt calculator.

This module builds amortization schedules for fixed-installment loans at a
known periodic rate and splits single payments against a debt into interest
and capital. Everything here is computed at full ``Decimal`` precision;
rounding for display is left to the caller so that rounding error does not
compound from one period to the next.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Union

from .config import DEFAULT_CURRENCY_PLACES
from .data_models import AmortizationRow, DebtSnapshot, PaymentAllocation, PaymentMode
from .exceptions import InsufficientPayment, InvalidInput
from .utils import Number, round_money, to_decimal, to_installment_count

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _positive(value: Number, field: str) -> Decimal:
    amount = to_decimal(value, field)
    if amount <= 0:
        raise InvalidInput(field, value, "must be positive")
    return amount


def _non_negative(value: Number, field: str) -> Decimal:
    amount = to_decimal(value, field)
    if amount < 0:
        raise InvalidInput(field, value, "must not be negative")
    return amount


def generate_schedule(
    principal: Number,
    periodic_rate: Number,
    installment_count: int,
    installment_amount: Number,
) -> List[AmortizationRow]:
    """Compute the amortization schedule of a fixed-installment loan.

    Parameters
    ----------
    principal: Decimal, float or int
        Opening balance. Must be positive.
    periodic_rate: Decimal, float or int
        Interest rate per period as a fraction, e.g. the value returned by
        ``solve_periodic_rate``.
    installment_count: int
        Number of rows to produce.
    installment_amount: Decimal, float or int
        Payment made every period.

    Returns
    -------
    List[AmortizationRow]
        Exactly ``installment_count`` rows in period order. When the payment
        does not cover the accruing interest the capital portion is negative
        and the balance grows; the schedule is not corrected for this. A
        negative balance after the last row is clamped to zero.
    """
    balance = _positive(principal, "principal")
    rate = to_decimal(periodic_rate, "periodic_rate")
    count = to_installment_count(installment_count)
    payment = _positive(installment_amount, "installment_amount")

    schedule: List[AmortizationRow] = []
    for period in range(1, count + 1):
        interest = balance * rate
        capital = payment - interest
        balance -= capital
        if period == count and balance < 0:
            # an overpaid loan terminates at zero
            balance = ZERO
        schedule.append(
            AmortizationRow(
                period=period,
                payment=payment,
                interest_portion=interest,
                capital_portion=capital,
                remaining_balance=balance,
            )
        )

    logger.debug(
        "Generated %d rows at rate %s; closing balance %s", count, rate, schedule[-1].remaining_balance
    )
    return schedule


def _coerce_mode(mode: Union[PaymentMode, str]) -> PaymentMode:
    if isinstance(mode, PaymentMode):
        return mode
    try:
        return PaymentMode(str(mode).lower())
    except ValueError as exc:
        raise InvalidInput("mode", mode, "expected 'capital', 'interest' or 'installment'") from exc


def allocate_payment(
    outstanding_balance: Number,
    periodic_rate: Number,
    payment_amount: Number,
    mode: Union[PaymentMode, str],
    places: Optional[int] = None,
) -> PaymentAllocation:
    """Split ``payment_amount`` into interest and capital.

    ``places`` is the number of decimal places the interest due is rounded to
    in ``FIXED_INSTALLMENT`` mode, matching the precision of the caller's
    ledger. It defaults to ``DEFAULT_CURRENCY_PLACES``.

    Raises
    ------
    InvalidInput
        On a negative balance or rate, a non-positive payment or an unknown
        mode.
    InsufficientPayment
        In ``FIXED_INSTALLMENT`` mode when the payment does not exceed the
        interest accrued for the period.
    """
    balance = _non_negative(outstanding_balance, "outstanding_balance")
    rate = _non_negative(periodic_rate, "periodic_rate")
    payment = _positive(payment_amount, "payment_amount")
    payment_mode = _coerce_mode(mode)

    if payment_mode is PaymentMode.CAPITAL_ONLY:
        capital = min(payment, balance)
        if capital < payment:
            logger.info("Capital payment %s exceeds balance %s", payment, balance)
        return PaymentAllocation(
            interest_portion=ZERO, capital_portion=capital, unapplied=payment - capital
        )

    if payment_mode is PaymentMode.INTEREST_ONLY:
        return PaymentAllocation(interest_portion=payment, capital_portion=ZERO)

    if places is None:
        places = DEFAULT_CURRENCY_PLACES
    accrued = balance * rate
    interest = round_money(accrued, places)
    capital = payment - interest
    if payment <= accrued or capital <= 0:
        raise InsufficientPayment(payment, interest)
    return PaymentAllocation(interest_portion=interest, capital_portion=capital)


def allocate_against(
    snapshot: DebtSnapshot,
    payment_amount: Number,
    mode: Union[PaymentMode, str],
    places: Optional[int] = None,
) -> PaymentAllocation:
    """Allocate a payment against a ``DebtSnapshot``."""
    return allocate_payment(
        snapshot.outstanding_balance, snapshot.periodic_rate, payment_amount, mode, places
    )
