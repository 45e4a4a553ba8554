"""Implied interest rate solver.

Given the principal of a fixed-installment loan, the number of installments
and the amount of each installment, this module finds the periodic interest
rate ``r`` that satisfies the annuity identity

    A = P * r * (1 + r)^n / ((1 + r)^n - 1)

The identity has no closed-form inverse, so the rate is found with
Newton-Raphson on ``f(r) = P * r * (1 + r)^n / ((1 + r)^n - 1) - A`` using a
numerical derivative. Rates are fractions per period (``0.0173`` rather than
``1.73``); converting to a percentage is left to the caller.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from .config import SolverSettings
from .exceptions import InvalidInput, NoConvergence
from .utils import Number, to_decimal, to_installment_count

logger = logging.getLogger(__name__)


def amortization_residual(
    principal: float, installment_count: int, installment_amount: float, rate: float
) -> float:
    """Return ``f(rate)``: the annuity payment at ``rate`` minus the actual one.

    At ``rate == 0`` the annuity formula is 0/0, so its limit ``P / n`` is used.
    Returns ``nan`` when the power term overflows.
    """
    if rate == 0:
        return principal / installment_count - installment_amount
    try:
        growth = (1 + rate) ** installment_count
        return principal * rate * growth / (growth - 1) - installment_amount
    except (OverflowError, ZeroDivisionError):
        return math.nan


def _positive(value: Number, field: str):
    amount = to_decimal(value, field)
    if amount <= 0:
        raise InvalidInput(field, value, "must be positive")
    if not math.isfinite(float(amount)):
        raise InvalidInput(field, value, "too large to solve in floating point")
    return amount


def solve_periodic_rate(
    principal: Number,
    installment_count: int,
    installment_amount: Number,
    settings: Optional[SolverSettings] = None,
) -> Optional[float]:
    """Solve the periodic rate implied by a fixed-installment loan.

    Parameters
    ----------
    principal: Decimal, float or int
        Amount borrowed. Must be positive.
    installment_count: int
        Number of installments. Must be a positive integer.
    installment_amount: Decimal, float or int
        Amount of each installment. Must be positive.
    settings: SolverSettings
        Newton-Raphson tuning. Defaults to ``SolverSettings()``. Once two
        iterates differ by less than ``settings.tolerance`` one further
        Newton step is taken, budget permitting, so that the residual is
        small as well as the step.

    Returns
    -------
    float or None
        The rate per period as a fraction. ``0.0`` when the installments do
        not repay more than the principal. ``None`` when no rate could be
        determined: the derivative vanished, a non-finite value appeared, the
        iterate left the domain ``r > -1`` or the iteration budget ran out.

    Raises
    ------
    InvalidInput
        If any argument is non-positive or not a number.
    """
    principal_value = _positive(principal, "principal")
    count = to_installment_count(installment_count)
    amount_value = _positive(installment_amount, "installment_amount")
    if settings is None:
        settings = SolverSettings()

    if amount_value * count <= principal_value:
        logger.debug(
            "Installments total %s against principal %s; rate is zero",
            amount_value * count,
            principal_value,
        )
        return 0.0

    p = float(principal_value)
    a = float(amount_value)
    h = settings.derivative_step
    rate = settings.initial_guess
    converged = False

    for iteration in range(1, settings.max_iterations + 1):
        value = amortization_residual(p, count, a, rate)
        # symmetric difference
        slope = (
            amortization_residual(p, count, a, rate + h)
            - amortization_residual(p, count, a, rate - h)
        ) / (2 * h)
        if not (math.isfinite(value) and math.isfinite(slope)) or slope == 0:
            if converged:
                return _accept(p, count, a, rate, settings.tolerance)
            logger.warning(
                "Rate solver stopped at iteration %d: residual=%r slope=%r", iteration, value, slope
            )
            return None

        next_rate = rate - value / slope
        logger.debug("Iteration %d: rate=%.12f residual=%.6f", iteration, next_rate, value)
        if not math.isfinite(next_rate) or next_rate <= -1:
            if converged:
                return _accept(p, count, a, rate, settings.tolerance)
            logger.warning("Rate solver diverged at iteration %d: rate=%r", iteration, next_rate)
            return None

        if converged:
            # the step fell below the tolerance last iteration; this one
            # brings the residual down with it
            return _accept(p, count, a, next_rate, settings.tolerance)
        converged = abs(next_rate - rate) < settings.tolerance
        rate = next_rate

    if converged:
        return _accept(p, count, a, rate, settings.tolerance)
    logger.warning(
        "Rate solver did not converge within %d iterations (last rate %.12f)",
        settings.max_iterations,
        rate,
    )
    return None


def _accept(principal: float, installment_count: int, installment_amount: float, rate: float, tolerance: float):
    if not math.isfinite(amortization_residual(principal, installment_count, installment_amount, rate)):
        logger.warning("Rate solver converged to %r but the residual is not finite", rate)
        return None
    if rate < 0:
        # rounding noise around a true rate of zero
        if rate > -tolerance:
            return 0.0
        logger.warning("Rate solver converged to a negative rate %r", rate)
        return None
    return rate


def require_periodic_rate(
    principal: Number,
    installment_count: int,
    installment_amount: Number,
    settings: Optional[SolverSettings] = None,
) -> float:
    """Like ``solve_periodic_rate`` but raise ``NoConvergence`` instead of returning ``None``."""
    rate = solve_periodic_rate(principal, installment_count, installment_amount, settings)
    if rate is None:
        raise NoConvergence(principal, installment_count, installment_amount)
    return rate
