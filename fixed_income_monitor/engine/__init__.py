"""Projection and exposure engine. Pure functions, no I/O."""
from .exposure import (
    GLOBAL_LIMIT,
    PER_INSTITUTION_LIMIT,
    WARNING_RATIO,
    classify_risk,
    normalize_institution,
    summarize_exposure,
)
from .portfolio import allocation_by_regime, summarize_portfolio
from .projection import DAYS_PER_YEAR, holding_period_years, project
from .rates import resolve_effective_rate

__all__ = [
    "DAYS_PER_YEAR",
    "GLOBAL_LIMIT",
    "PER_INSTITUTION_LIMIT",
    "WARNING_RATIO",
    "allocation_by_regime",
    "classify_risk",
    "holding_period_years",
    "normalize_institution",
    "project",
    "resolve_effective_rate",
    "summarize_exposure",
    "summarize_portfolio",
]
