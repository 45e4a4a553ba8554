from decimal import Decimal

import pytest

from debt_calc.data_models import DebtSnapshot, PaymentAllocation, PaymentMode
from debt_calc.engine import allocate_against, allocate_payment
from debt_calc.exceptions import InsufficientPayment, InvalidInput


class TestCapitalOnly:
    def test_whole_payment_reduces_principal(self):
        allocation = allocate_payment(500_000, 0, 100_000, PaymentMode.CAPITAL_ONLY)
        assert allocation == PaymentAllocation(
            interest_portion=Decimal("0"), capital_portion=Decimal("100000")
        )

    def test_rate_is_ignored(self):
        allocation = allocate_payment(500_000, Decimal("0.02"), 100_000, PaymentMode.CAPITAL_ONLY)
        assert allocation.interest_portion == 0
        assert allocation.capital_portion == 100_000

    @pytest.mark.parametrize("balance, payment", [(300, 500), (0, 10), (1_000, 1_000), (999.99, 1_000)])
    def test_capital_never_exceeds_balance(self, balance, payment):
        allocation = allocate_payment(balance, 0, payment, "capital")
        assert allocation.capital_portion <= Decimal(str(balance))
        assert allocation.total == Decimal(str(payment))

    def test_excess_is_reported_as_unapplied(self):
        allocation = allocate_payment(300, 0, 500, PaymentMode.CAPITAL_ONLY)
        assert allocation.capital_portion == 300
        assert allocation.unapplied == 200


class TestInterestOnly:
    def test_whole_payment_is_interest(self):
        allocation = allocate_payment(1_000_000, Decimal("0.02"), 20_000, PaymentMode.INTEREST_ONLY)
        assert allocation.interest_portion == 20_000
        assert allocation.capital_portion == 0
        assert allocation.unapplied == 0

    def test_payment_above_accrued_interest_is_still_interest(self):
        allocation = allocate_payment(1_000, Decimal("0.01"), 500, "interest")
        assert allocation.interest_portion == 500


class TestFixedInstallment:
    def test_interest_first_then_capital(self):
        allocation = allocate_payment(1_000_000, Decimal("0.02"), 50_000, PaymentMode.FIXED_INSTALLMENT)
        assert allocation.interest_portion == Decimal("20000.00")
        assert allocation.capital_portion == Decimal("30000.00")
        assert allocation.interest_portion + allocation.capital_portion == 50_000

    def test_interest_is_rounded_half_up(self):
        # 1234.56 * 0.0175 = 21.6048
        allocation = allocate_payment(Decimal("1234.56"), Decimal("0.0175"), 100, "installment")
        assert allocation.interest_portion == Decimal("21.60")
        assert allocation.capital_portion == Decimal("78.40")

    def test_interest_rounded_to_whole_units(self):
        allocation = allocate_payment(Decimal("1234.56"), Decimal("0.0175"), 100, "installment", places=0)
        assert allocation.interest_portion == Decimal("22")
        assert allocation.capital_portion == Decimal("78")

    def test_payment_below_interest_is_rejected(self):
        with pytest.raises(InsufficientPayment) as excinfo:
            allocate_payment(1_000_000, Decimal("0.02"), 15_000, PaymentMode.FIXED_INSTALLMENT)
        assert excinfo.value.interest_due == Decimal("20000.00")
        assert excinfo.value.payment == Decimal("15000")

    def test_payment_equal_to_interest_is_rejected(self):
        with pytest.raises(InsufficientPayment):
            allocate_payment(1_000_000, Decimal("0.02"), 20_000, PaymentMode.FIXED_INSTALLMENT)

    def test_payment_just_below_unrounded_interest_is_rejected(self):
        # accrued 100.4, rounded to 100 at zero places
        with pytest.raises(InsufficientPayment):
            allocate_payment(Decimal("10040"), Decimal("0.01"), Decimal("100.3"), "installment", places=0)

    def test_zero_rate(self):
        allocation = allocate_payment(1_000, 0, 100, PaymentMode.FIXED_INSTALLMENT)
        assert allocation.interest_portion == 0
        assert allocation.capital_portion == 100


class TestAllocationInput:
    @pytest.mark.parametrize(
        "balance, rate, payment, mode",
        [
            (-1, 0, 100, "capital"),
            (1_000, -0.01, 100, "installment"),
            (1_000, 0.01, 0, "interest"),
            (1_000, 0.01, -50, "capital"),
            (1_000, 0.01, 100, "principal"),
            (1_000, 0.01, None, "capital"),
        ],
    )
    def test_invalid_input(self, balance, rate, payment, mode):
        with pytest.raises(InvalidInput):
            allocate_payment(balance, rate, payment, mode)

    def test_mode_names_are_case_insensitive(self):
        allocation = allocate_payment(1_000, 0, 100, "CAPITAL")
        assert allocation.capital_portion == 100

    def test_allocate_against_snapshot(self):
        snapshot = DebtSnapshot(outstanding_balance=Decimal("1000000"), periodic_rate=Decimal("0.02"))
        allocation = allocate_against(snapshot, 50_000, PaymentMode.FIXED_INSTALLMENT)
        assert allocation.capital_portion == Decimal("30000.00")
