"""Data models for the debt calculator.

This module defines the value records passed in and out of the calculation
engine: the known terms of a fixed-installment loan, a single row of an
amortization schedule, a point-in-time view of a debt and the split of a
payment into interest and capital. All records are frozen dataclasses; the
engine builds a fresh one per call and never mutates them.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class PaymentMode(str, Enum):
    """How a single payment against a debt is booked.

    ``CAPITAL_ONLY`` reduces principal only, ``INTEREST_ONLY`` records the
    whole payment as interest and ``FIXED_INSTALLMENT`` charges the interest
    accrued for the period first and applies the remainder to capital.
    """

    CAPITAL_ONLY = "capital"
    INTEREST_ONLY = "interest"
    FIXED_INSTALLMENT = "installment"


@dataclass(frozen=True)
class LoanParameters:
    """The fixed terms of a loan whose interest rate is unknown.

    Attributes
    ----------
    principal: Decimal
        Amount borrowed.
    installment_count: int
        Number of equal periodic installments.
    installment_amount: Decimal
        Amount of each installment.
    """

    principal: Decimal
    installment_count: int
    installment_amount: Decimal

    @property
    def total_of_payments(self) -> Decimal:
        return self.installment_amount * self.installment_count

    @property
    def has_positive_rate(self) -> bool:
        """True when the installments repay more than was borrowed."""
        return self.total_of_payments > self.principal


@dataclass(frozen=True)
class AmortizationRow:
    """One period of an amortization schedule.

    Values are kept at full precision. ``capital_portion`` is negative when
    the installment does not cover the interest accrued in the period, in
    which case ``remaining_balance`` grows.
    """

    period: int
    payment: Decimal
    interest_portion: Decimal
    capital_portion: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class DebtSnapshot:
    outstanding_balance: Decimal
    periodic_rate: Decimal  # fraction per period, e.g. 0.02


@dataclass(frozen=True)
class PaymentAllocation:
    """The split of a payment into interest and capital.

    ``unapplied`` holds the part of a capital-only payment that exceeds the
    outstanding balance. The three fields always add up to the payment.
    """

    interest_portion: Decimal
    capital_portion: Decimal
    unapplied: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.interest_portion + self.capital_portion + self.unapplied


@dataclass(frozen=True)
class ScheduleSummary:
    """Totals over the leading rows of a schedule."""

    periods: int
    total_paid: Decimal
    interest_paid: Decimal
    capital_paid: Decimal
    remaining_balance: Decimal
    negative_amortization_periods: tuple = ()
