"""Effective annual rate resolution per index regime."""
from __future__ import annotations

from ..errors import InvalidRegimeError
from ..models import IndexRegime, MarketRates


def resolve_effective_rate(
    regime: IndexRegime | str,
    rate_parameter: float,
    market_rates: MarketRates,
) -> float:
    """Return the effective annual nominal rate as a fraction.

    - POST_FIXED: ``rate_parameter`` is a percent of the reference index,
      so 110 at a 12% index gives 0.132.
    - INFLATION_LINKED: ``rate_parameter`` is a real spread compounded over
      inflation, ``(1 + ipca) * (1 + spread) - 1``.
    - FIXED_NOMINAL: ``rate_parameter`` is the annual rate itself; market
      rates are ignored.

    Raises:
        InvalidRegimeError: ``regime`` is not an :class:`IndexRegime` value.
    """
    if regime == IndexRegime.POST_FIXED:
        return (market_rates.reference_index / 100.0) * (rate_parameter / 100.0)
    if regime == IndexRegime.INFLATION_LINKED:
        return (1.0 + market_rates.inflation / 100.0) * (
            1.0 + rate_parameter / 100.0
        ) - 1.0
    if regime == IndexRegime.FIXED_NOMINAL:
        return rate_parameter / 100.0
    raise InvalidRegimeError(regime)
