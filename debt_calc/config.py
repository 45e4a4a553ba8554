"""Centralized configuration for the debt calculator.

The rate solver constants below are empirical: they suit consumer loans with
principals in the thousands to millions and periodic rates of roughly 1-5 %.
Callers working at very different scales can override them per call with a
``SolverSettings`` instance or globally through environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import InvalidInput

# =============================================================================
# RATE SOLVER
# =============================================================================

# Starting point for Newton-Raphson (1 % per period)
DEFAULT_INITIAL_GUESS = 0.01

# Stop once successive iterates differ by less than this
DEFAULT_TOLERANCE = 1e-6

# Step used for the numerical derivative
DEFAULT_DERIVATIVE_STEP = 1e-5

DEFAULT_MAX_ITERATIONS = 50

# =============================================================================
# PRESENTATION
# =============================================================================

# Decimal places money is rounded to for display and interest bookkeeping
DEFAULT_CURRENCY_PLACES = 2

# Periods per year used to convert between periodic and annual rates
PERIODS_PER_YEAR = 12

# Rows printed to the terminal before truncating
MAX_PRINTED_ROWS = 120

ENV_PREFIX = "DEBT_CALC_"


@dataclass(frozen=True)
class SolverSettings:
    initial_guess: float = DEFAULT_INITIAL_GUESS
    tolerance: float = DEFAULT_TOLERANCE
    derivative_step: float = DEFAULT_DERIVATIVE_STEP
    max_iterations: int = DEFAULT_MAX_ITERATIONS


def _env_value(environ: Mapping[str, str], name: str, cast, default):
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise InvalidInput(ENV_PREFIX + name, raw, "not a valid number") from exc


def load_solver_settings(environ: Optional[Mapping[str, str]] = None) -> SolverSettings:
    """Build solver settings from ``DEBT_CALC_*`` environment variables.

    Unset variables fall back to the module defaults.
    """
    if environ is None:
        environ = os.environ
    settings = SolverSettings(
        initial_guess=_env_value(environ, "INITIAL_GUESS", float, DEFAULT_INITIAL_GUESS),
        tolerance=_env_value(environ, "TOLERANCE", float, DEFAULT_TOLERANCE),
        derivative_step=_env_value(environ, "DERIVATIVE_STEP", float, DEFAULT_DERIVATIVE_STEP),
        max_iterations=_env_value(environ, "MAX_ITERATIONS", int, DEFAULT_MAX_ITERATIONS),
    )
    if settings.tolerance <= 0:
        raise InvalidInput("tolerance", settings.tolerance, "must be positive")
    if settings.derivative_step <= 0:
        raise InvalidInput("derivative_step", settings.derivative_step, "must be positive")
    if settings.max_iterations <= 0:
        raise InvalidInput("max_iterations", settings.max_iterations, "must be positive")
    return settings


def load_currency_places(environ: Optional[Mapping[str, str]] = None) -> int:
    if environ is None:
        environ = os.environ
    places = _env_value(environ, "CURRENCY_PLACES", int, DEFAULT_CURRENCY_PLACES)
    if places < 0:
        raise InvalidInput("currency_places", places, "must not be negative")
    return places
