"""Display helpers for amounts and dates (pt-BR conventions)."""
from __future__ import annotations

from datetime import date


def format_currency(value: float) -> str:
    """Format as Brazilian reais, e.g. ``R$ 1.234.567,89``."""
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}"
    # 1,234.56 -> 1.234,56
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def format_date(value: date | None) -> str:
    if value is None:
        return "—"
    return value.strftime("%d/%m/%Y")


def format_pct(value: float) -> str:
    return f"{value:.1f}%"
