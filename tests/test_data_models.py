import dataclasses
from decimal import Decimal

import pytest

from debt_calc.data_models import LoanParameters, PaymentAllocation, PaymentMode
from debt_calc.solver import solve_periodic_rate


def test_loan_parameters_totals():
    loan = LoanParameters(Decimal("15000000"), 36, Decimal("761000"))
    assert loan.total_of_payments == Decimal("27396000")
    assert loan.has_positive_rate


def test_loan_without_positive_rate_solves_to_zero():
    loan = LoanParameters(Decimal("1000"), 10, Decimal("100"))
    assert not loan.has_positive_rate
    assert solve_periodic_rate(loan.principal, loan.installment_count, loan.installment_amount) == 0.0


def test_loan_parameters_are_frozen():
    loan = LoanParameters(Decimal("1000"), 10, Decimal("110"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        loan.principal = Decimal("1")


def test_allocation_total_includes_unapplied():
    allocation = PaymentAllocation(Decimal("0"), Decimal("300"), Decimal("200"))
    assert allocation.total == Decimal("500")


def test_payment_mode_values():
    assert PaymentMode("capital") is PaymentMode.CAPITAL_ONLY
    assert PaymentMode("interest") is PaymentMode.INTEREST_ONLY
    assert PaymentMode("installment") is PaymentMode.FIXED_INSTALLMENT
