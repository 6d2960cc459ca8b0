"""Portfolio-level headline figures."""
from __future__ import annotations

from collections.abc import Sequence

from ..models import IndexRegime, PortfolioSummary, Position
from .money import to_cents


def summarize_portfolio(positions: Sequence[Position]) -> PortfolioSummary:
    total_invested = sum(p.principal for p in positions)
    total_net_future = sum(p.net_future_value for p in positions)
    if total_invested > 0:
        return_pct = (total_net_future / total_invested - 1.0) * 100.0
    else:
        return_pct = 0.0
    return PortfolioSummary(
        total_invested=to_cents(total_invested),
        total_net_future=to_cents(total_net_future),
        projected_return_pct=return_pct,
        next_due_date=min((p.due_date for p in positions), default=None),
        position_count=len(positions),
    )


def allocation_by_regime(positions: Sequence[Position]) -> dict[IndexRegime, float]:
    """Principal per index regime, in first-seen order."""
    allocation: dict[IndexRegime, float] = {}
    for p in positions:
        allocation[p.regime] = allocation.get(p.regime, 0.0) + p.principal
    return {regime: to_cents(total) for regime, total in allocation.items()}
