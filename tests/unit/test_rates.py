"""Unit tests for effective rate resolution."""
from __future__ import annotations

import pytest

from fixed_income_monitor.engine import resolve_effective_rate
from fixed_income_monitor.errors import InvalidRegimeError, ProjectionError
from fixed_income_monitor.models import IndexRegime, MarketRates


class TestPostFixed:
    def test_full_index(self, sample_rates: MarketRates) -> None:
        rate = resolve_effective_rate(IndexRegime.POST_FIXED, 100.0, sample_rates)
        assert rate == pytest.approx(0.12)

    def test_fraction_of_index(self, sample_rates: MarketRates) -> None:
        rate = resolve_effective_rate(IndexRegime.POST_FIXED, 110.0, sample_rates)
        assert rate == pytest.approx(0.132)

    def test_zero_parameter_is_zero_rate(self) -> None:
        for index in (0.0, 12.0, 45.0):
            rates = MarketRates(reference_index=index, inflation=4.5)
            assert resolve_effective_rate(IndexRegime.POST_FIXED, 0.0, rates) == 0.0


class TestInflationLinked:
    def test_compounds_spread_over_inflation(self) -> None:
        rates = MarketRates(reference_index=12.0, inflation=10.0)
        rate = resolve_effective_rate(IndexRegime.INFLATION_LINKED, 6.0, rates)
        # 1.10 * 1.06 - 1, not 0.10 + 0.06
        assert rate == pytest.approx(0.166)

    def test_zero_spread_tracks_inflation(self, sample_rates: MarketRates) -> None:
        rate = resolve_effective_rate(IndexRegime.INFLATION_LINKED, 0.0, sample_rates)
        assert rate == pytest.approx(0.045)


class TestFixedNominal:
    def test_flat_rate(self, sample_rates: MarketRates) -> None:
        rate = resolve_effective_rate(IndexRegime.FIXED_NOMINAL, 12.5, sample_rates)
        assert rate == pytest.approx(0.125)

    def test_ignores_market_rates(self) -> None:
        low = MarketRates(reference_index=2.0, inflation=1.0)
        high = MarketRates(reference_index=40.0, inflation=30.0)
        assert resolve_effective_rate(
            IndexRegime.FIXED_NOMINAL, 12.5, low
        ) == resolve_effective_rate(IndexRegime.FIXED_NOMINAL, 12.5, high)


class TestRegimeValues:
    def test_accepts_raw_regime_value(self, sample_rates: MarketRates) -> None:
        rate = resolve_effective_rate("Prefixado", 10.0, sample_rates)
        assert rate == pytest.approx(0.10)

    def test_unknown_regime_raises(self, sample_rates: MarketRates) -> None:
        with pytest.raises(InvalidRegimeError, match="SELIC"):
            resolve_effective_rate("SELIC", 100.0, sample_rates)

    def test_invalid_regime_is_projection_error(self, sample_rates: MarketRates) -> None:
        with pytest.raises(ProjectionError):
            resolve_effective_rate(None, 100.0, sample_rates)  # type: ignore[arg-type]
