"""Data models. All frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum


class IndexRegime(str, Enum):
    """How a position's rate parameter is indexed."""

    POST_FIXED = "CDI"
    INFLATION_LINKED = "IPCA+"
    FIXED_NOMINAL = "Prefixado"


class InvestmentTitle(str, Enum):
    CDB = "CDB"
    LCI = "LCI"
    LTN = "LTN"
    NTNB = "NTN-B"


class RiskLevel(str, Enum):
    SAFE = "Safe"
    WARNING = "Warning"
    OVER = "Over"


@dataclass(frozen=True)
class MarketRates:
    """Snapshot of the annual reference rates, in percent."""

    reference_index: float
    inflation: float


@dataclass(frozen=True)
class CalculationResult:
    """Projected value at maturity, rounded to cents."""

    gross: float
    net: float


@dataclass(frozen=True)
class Position:
    """A fixed-income position held at one institution.

    ``rate_parameter`` is read according to ``regime``: percent of the
    reference index, real spread over inflation, or the flat annual rate.
    """

    id: str
    institution: str
    regime: IndexRegime
    principal: float
    rate_parameter: float
    tax_rate: float
    start_date: date
    due_date: date
    broker: str = ""
    title: InvestmentTitle = InvestmentTitle.CDB
    quantity: int = 1
    gross_future_value: float = 0.0
    net_future_value: float = 0.0
    created_at: datetime | None = None

    def with_projection(self, result: CalculationResult) -> Position:
        """Return a copy carrying the projected gross and net values."""
        return replace(
            self,
            gross_future_value=result.gross,
            net_future_value=result.net,
        )


@dataclass(frozen=True)
class InstitutionExposure:
    """Projected gross exposure at a single (normalized) institution."""

    institution: str
    total: float

    def usage_pct(self, per_institution_limit: float) -> float:
        """Share of the per-institution limit in use, capped at 100."""
        return min(self.total / per_institution_limit * 100.0, 100.0)

    def exceeds(self, per_institution_limit: float) -> bool:
        return self.total > per_institution_limit


@dataclass(frozen=True)
class ExposureReport:
    """Deposit-insurance exposure across a set of positions."""

    institutions: tuple[InstitutionExposure, ...]
    global_total: float
    risk_level: RiskLevel
    global_limit: float
    per_institution_limit: float

    @property
    def institution_count(self) -> int:
        return len(self.institutions)

    @property
    def global_usage_pct(self) -> float:
        return min(self.global_total / self.global_limit * 100.0, 100.0)

    @property
    def uncovered_amount(self) -> float:
        return max(0.0, self.global_total - self.global_limit)

    def institutions_over_limit(self) -> tuple[InstitutionExposure, ...]:
        return tuple(
            e for e in self.institutions if e.exceeds(self.per_institution_limit)
        )


@dataclass(frozen=True)
class PortfolioSummary:
    """Headline figures for a set of positions."""

    total_invested: float
    total_net_future: float
    projected_return_pct: float
    next_due_date: date | None
    position_count: int
