"""Compound growth and tax-on-gain projection for a single position.

Day count is calendar days / 365 throughout. Values are carried unrounded and
only rounded to cents in the returned :class:`CalculationResult`.
"""
from __future__ import annotations

import math
from datetime import date

from ..errors import InvalidPeriodError, InvalidPrincipalError
from ..models import CalculationResult, MarketRates, Position
from .money import to_cents
from .rates import resolve_effective_rate

DAYS_PER_YEAR = 365.0


def holding_period_years(start_date: date, due_date: date) -> float:
    """Holding period in years on a calendar-day / 365 basis."""
    days = (due_date - start_date).days
    if days <= 0:
        raise InvalidPeriodError(start_date, due_date)
    return days / DAYS_PER_YEAR


def compound_gross(principal: float, effective_rate: float, years: float) -> float:
    """``principal * (1 + rate) ** years`` with a real-valued exponent.

    Growth beyond the float range yields ``math.inf``.
    """
    # A rate at or below -100% wipes out the principal.
    growth = max(0.0, 1.0 + effective_rate)
    try:
        return principal * growth**years
    except OverflowError:
        return math.inf


def apply_tax_on_gain(principal: float, gross: float, tax_rate: float) -> float:
    """Net value after withholding ``tax_rate`` percent of the gain.

    Losses are not taxed and produce no credit: the net value equals gross.
    """
    gain = gross - principal
    if gain < 0:
        return gross
    return principal + gain * (1.0 - tax_rate / 100.0)


def project(position: Position, market_rates: MarketRates) -> CalculationResult:
    """Project gross and net value at maturity for ``position``.

    Pure and deterministic: the same position and rates always give the
    same result.

    Raises:
        InvalidPrincipalError: principal is zero or negative.
        InvalidPeriodError: due date is not after start date.
        InvalidRegimeError: unknown index regime.
    """
    if position.principal <= 0:
        raise InvalidPrincipalError(position.principal)
    years = holding_period_years(position.start_date, position.due_date)
    rate = resolve_effective_rate(
        position.regime, position.rate_parameter, market_rates
    )

    gross = compound_gross(position.principal, rate, years)
    net = apply_tax_on_gain(position.principal, gross, position.tax_rate)
    return CalculationResult(gross=to_cents(gross), net=to_cents(net))
