from decimal import Decimal

import pytest

from debt_calc.exceptions import InvalidInput
from debt_calc.utils import (
    annual_to_periodic,
    decimal_from_str,
    effective_annual_rate,
    fraction_to_percent,
    percent_to_fraction,
    round_money,
    to_decimal,
    to_installment_count,
)


def test_decimal_from_str_strips_separators():
    assert decimal_from_str("15,000,000") == Decimal("15000000")


def test_decimal_from_str_rejects_text():
    with pytest.raises(ValueError):
        decimal_from_str("fifteen")


def test_to_decimal_uses_float_repr():
    assert to_decimal(0.1, "rate") == Decimal("0.1")


@pytest.mark.parametrize("value", [float("inf"), float("nan"), "NaN", None, True, "abc"])
def test_to_decimal_rejects(value):
    with pytest.raises(InvalidInput):
        to_decimal(value, "amount")


@pytest.mark.parametrize("value", [36, 36.0, Decimal("36"), "36", " 36 "])
def test_installment_count_accepted(value):
    assert to_installment_count(value) == 36


@pytest.mark.parametrize("value", [0, -1, 2.5, Decimal("2.5"), "3x", False, float("inf")])
def test_installment_count_rejected(value):
    with pytest.raises(InvalidInput):
        to_installment_count(value)


def test_rate_conversions():
    assert percent_to_fraction(Decimal("1.73")) == Decimal("0.0173")
    assert fraction_to_percent(Decimal("0.0173")) == Decimal("1.73")
    assert annual_to_periodic(Decimal("0.24")) == Decimal("0.02")


def test_effective_annual_rate():
    assert effective_annual_rate(0.01) == pytest.approx(0.12682503, abs=1e-8)


@pytest.mark.parametrize(
    "value, places, expected",
    [
        (Decimal("2.675"), 2, Decimal("2.68")),
        (Decimal("259499.5"), 0, Decimal("259500")),
        (Decimal("-10.005"), 2, Decimal("-10.01")),
    ],
)
def test_round_money(value, places, expected):
    assert round_money(value, places) == expected
