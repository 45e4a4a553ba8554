"""Utility functions for the debt calculator.

This module provides helpers for turning user input into ``Decimal`` values,
for converting rates between the fraction form used by the engine and the
percentage form shown to users, and for rounding money for presentation.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Union

from .config import PERIODS_PER_YEAR
from .exceptions import InvalidInput

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[Decimal, float, int, str]

HUNDRED = Decimal(100)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").strip()
        return Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def to_decimal(value: Number, field: str) -> Decimal:
    """Coerce ``value`` to a finite ``Decimal`` or raise ``InvalidInput``.

    Floats go through ``repr`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        raise InvalidInput(field, value, "a number is required")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidInput(field, value, "must be finite")
        result = Decimal(repr(value))
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        try:
            result = decimal_from_str(str(value))
        except ValueError as exc:
            raise InvalidInput(field, value, "not a number") from exc
    if not result.is_finite():
        raise InvalidInput(field, value, "must be finite")
    return result


def to_installment_count(value: object, field: str = "installment_count") -> int:
    """Return ``value`` as a positive integer count."""
    if isinstance(value, bool) or value is None:
        raise InvalidInput(field, value, "must be a positive integer")
    if isinstance(value, int):
        count = value
    elif isinstance(value, float) and math.isfinite(value) and value.is_integer():
        count = int(value)
    elif isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        count = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        count = int(value.strip())
    else:
        raise InvalidInput(field, value, "must be a positive integer")
    if count <= 0:
        raise InvalidInput(field, value, "must be a positive integer")
    return count


def percent_to_fraction(percent: Number) -> Decimal:
    """Convert a percentage such as ``1.73`` into the fraction ``0.0173``."""
    return to_decimal(percent, "rate") / HUNDRED


def fraction_to_percent(fraction: Number) -> Decimal:
    return to_decimal(fraction, "rate") * HUNDRED


def annual_to_periodic(annual_rate: Number, periods_per_year: int = PERIODS_PER_YEAR) -> Decimal:
    """Return the nominal periodic rate for a stated annual rate (both fractions)."""
    return to_decimal(annual_rate, "annual_rate") / Decimal(periods_per_year)


def effective_annual_rate(periodic_rate: float, periods_per_year: int = PERIODS_PER_YEAR) -> float:
    """Compound a periodic rate over a year: ``(1 + r) ** periods - 1``."""
    return (1 + periodic_rate) ** periods_per_year - 1


def round_money(value: Decimal, places: int) -> Decimal:
    """Round a money value half-up to ``places`` decimal places."""
    quantum = Decimal(1).scaleb(-places)
    return value.quantize(quantum, rounding=ROUND_HALF_UP)
