from decimal import Decimal

import pytest

from debt_calc.engine import generate_schedule
from debt_calc.exceptions import InvalidInput
from debt_calc.solver import solve_periodic_rate
from debt_calc.summary import negative_amortization_periods, summarize_schedule


@pytest.fixture
def loan_rows():
    rate = solve_periodic_rate(15_000_000, 36, 761_000)
    return generate_schedule(15_000_000, rate, 36, 761_000)


def test_status_after_fifteen_payments(loan_rows):
    status = summarize_schedule(loan_rows, 15_000_000, through_period=15)
    first_fifteen = loan_rows[:15]
    assert status.periods == 15
    assert status.total_paid == Decimal(761_000) * 15
    assert status.capital_paid == sum(row.capital_portion for row in first_fifteen)
    assert status.interest_paid == sum(row.interest_portion for row in first_fifteen)
    assert float(status.remaining_balance) == pytest.approx(float(first_fifteen[-1].remaining_balance), abs=1e-6)
    assert float(status.capital_paid + status.interest_paid) == pytest.approx(float(status.total_paid))


def test_full_schedule_summary(loan_rows):
    summary = summarize_schedule(loan_rows, 15_000_000)
    assert summary.periods == 36
    assert float(summary.remaining_balance) == pytest.approx(0, abs=1.0)
    assert float(summary.interest_paid) == pytest.approx(36 * 761_000 - 15_000_000, abs=1.0)
    assert summary.negative_amortization_periods == ()


def test_zero_periods():
    rows = generate_schedule(1_000, 0.01, 12, 100)
    summary = summarize_schedule(rows, 1_000, through_period=0)
    assert summary.total_paid == 0
    assert summary.remaining_balance == 1_000


@pytest.mark.parametrize("through", [-1, 13])
def test_out_of_range(through):
    rows = generate_schedule(1_000, 0.01, 12, 100)
    with pytest.raises(InvalidInput):
        summarize_schedule(rows, 1_000, through_period=through)


def test_negative_amortization_periods():
    # 5 % of 1,000 is 50, more than the installment of 40
    rows = generate_schedule(1_000, Decimal("0.05"), 3, 40)
    assert negative_amortization_periods(rows) == [1, 2, 3]
    assert summarize_schedule(rows, 1_000).negative_amortization_periods == (1, 2, 3)
    assert negative_amortization_periods(generate_schedule(1_000, 0, 3, 40)) == []
