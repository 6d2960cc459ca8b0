"""Portfolio operations: projection on write and bulk recompute on rate changes."""
from __future__ import annotations

import logging
import threading
import uuid
from datetime import date, datetime, timezone

from ..config import CoverageConfig
from ..engine import (
    allocation_by_regime,
    project,
    summarize_exposure,
    summarize_portfolio,
)
from ..interfaces.store import MarketRatesStore, PositionStore
from ..models import (
    CalculationResult,
    ExposureReport,
    IndexRegime,
    InvestmentTitle,
    MarketRates,
    PortfolioSummary,
    Position,
)

logger = logging.getLogger(__name__)


class PortfolioService:
    """Keeps stored positions' projected values in step with market rates."""

    def __init__(
        self,
        store: PositionStore,
        rates_store: MarketRatesStore,
        coverage: CoverageConfig | None = None,
    ) -> None:
        self._store = store
        self._rates_store = rates_store
        self._coverage = coverage or CoverageConfig()
        self._recompute_lock = threading.Lock()

    @property
    def coverage(self) -> CoverageConfig:
        return self._coverage

    @staticmethod
    def new_position(
        *,
        institution: str,
        regime: IndexRegime,
        principal: float,
        rate_parameter: float,
        tax_rate: float,
        start_date: date,
        due_date: date,
        broker: str = "",
        title: InvestmentTitle = InvestmentTitle.CDB,
        quantity: int = 1,
    ) -> Position:
        """Draft a new position with a fresh id. Nothing is stored."""
        return Position(
            id=str(uuid.uuid4()),
            institution=institution.strip(),
            regime=regime,
            principal=principal,
            rate_parameter=rate_parameter,
            tax_rate=tax_rate,
            start_date=start_date,
            due_date=due_date,
            broker=broker.strip(),
            title=title,
            quantity=quantity,
            created_at=datetime.now(timezone.utc),
        )

    def market_rates(self) -> MarketRates:
        return self._rates_store.get_market_rates()

    def preview(
        self, position: Position, rates: MarketRates | None = None
    ) -> CalculationResult:
        """Project ``position`` without touching the store."""
        return project(position, rates or self.market_rates())

    def list_positions(self) -> list[Position]:
        return self._store.list_positions()

    def get(self, position_id: str) -> Position:
        return self._store.get_position(position_id)

    def add(self, position: Position) -> Position:
        projected = position.with_projection(self.preview(position))
        stored = self._store.add_position(projected)
        logger.debug("Added position %s (%s)", stored.id, stored.institution)
        return stored

    def update(self, position: Position) -> Position:
        projected = position.with_projection(self.preview(position))
        stored = self._store.update_position(projected)
        logger.debug("Updated position %s (%s)", stored.id, stored.institution)
        return stored

    def remove(self, position_id: str) -> bool:
        removed = self._store.delete_position(position_id)
        if removed:
            logger.debug("Removed position %s", position_id)
        return removed

    def set_market_rates(self, rates: MarketRates) -> list[Position]:
        """Store a new rates snapshot and reproject every position against it."""
        self._rates_store.set_market_rates(rates)
        logger.info(
            "Market rates set: reference index %.2f%%, inflation %.2f%%",
            rates.reference_index,
            rates.inflation,
        )
        return self.recompute_all()

    def recompute_all(self) -> list[Position]:
        """Reproject all stored positions and persist them as one batch.

        Only one recompute runs at a time per service. Every projection is
        computed before anything is written, so a failing position leaves
        the store untouched.
        """
        with self._recompute_lock:
            rates = self.market_rates()
            positions = self._store.list_positions()
            logger.info("Recomputing %d positions", len(positions))

            updated = [p.with_projection(project(p, rates)) for p in positions]
            self._store.replace_positions(updated)

            logger.info("Recomputed and saved %d positions", len(updated))
            return updated

    def exposure(self) -> ExposureReport:
        return summarize_exposure(
            self._store.list_positions(),
            global_limit=self._coverage.global_limit,
            per_institution_limit=self._coverage.per_institution_limit,
            warning_ratio=self._coverage.warning_ratio,
        )

    def summary(self) -> PortfolioSummary:
        return summarize_portfolio(self._store.list_positions())

    def allocation(self) -> dict[IndexRegime, float]:
        """Principal invested per index regime."""
        return allocation_by_regime(self._store.list_positions())
