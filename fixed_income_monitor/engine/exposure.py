"""Deposit-insurance exposure per institution and across the portfolio."""
from __future__ import annotations

from collections.abc import Iterable

from ..models import ExposureReport, InstitutionExposure, Position, RiskLevel
from .money import to_cents

# Default coverage ceilings, overridable through config.
GLOBAL_LIMIT = 1_000_000.0
PER_INSTITUTION_LIMIT = 250_000.0
WARNING_RATIO = 0.8


def normalize_institution(name: str) -> str:
    """Grouping key for an institution name: trimmed and upper-cased."""
    return name.strip().upper()


def classify_risk(
    global_total: float,
    global_limit: float = GLOBAL_LIMIT,
    warning_ratio: float = WARNING_RATIO,
) -> RiskLevel:
    if global_total > global_limit:
        return RiskLevel.OVER
    if global_total > global_limit * warning_ratio:
        return RiskLevel.WARNING
    return RiskLevel.SAFE


def summarize_exposure(
    positions: Iterable[Position],
    global_limit: float = GLOBAL_LIMIT,
    per_institution_limit: float = PER_INSTITUTION_LIMIT,
    warning_ratio: float = WARNING_RATIO,
) -> ExposureReport:
    """Group projected gross values by institution and classify the total.

    Coverage is assessed on gross (pre-tax) exposure. Institutions are
    ordered by total descending, then by name.
    """
    totals: dict[str, float] = {}
    global_total = 0.0
    for position in positions:
        key = normalize_institution(position.institution)
        totals[key] = totals.get(key, 0.0) + position.gross_future_value
        global_total += position.gross_future_value

    # Round before sorting so equal cent totals fall back to name order.
    rounded = {name: to_cents(total) for name, total in totals.items()}
    institutions = tuple(
        InstitutionExposure(institution=name, total=total)
        for name, total in sorted(rounded.items(), key=lambda kv: (-kv[1], kv[0]))
    )
    global_total = to_cents(global_total)
    return ExposureReport(
        institutions=institutions,
        global_total=global_total,
        risk_level=classify_risk(global_total, global_limit, warning_ratio),
        global_limit=global_limit,
        per_institution_limit=per_institution_limit,
    )
