"""File-backed portfolio store: positions and market rates in one YAML document.

Layout::

    market_rates:
      reference_index: 11.25
      inflation: 4.5
      updated_at: "2025-01-02T10:00:00+00:00"
    positions:
      - id: "..."
        institution: Banco X
        regime: CDI
        ...

Every write replaces the whole file through a temporary sibling and
``os.replace``, so a failed write leaves the previous contents in place.
"""
from __future__ import annotations

import logging
import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from ..models import IndexRegime, InvestmentTitle, MarketRates, Position

logger = logging.getLogger(__name__)

MAX_TAX_RATE = 22.5


# ---------------------------------------------------------------------------
# Record <-> model conversion
# ---------------------------------------------------------------------------


def _parse_date(value: Any) -> date:
    # PyYAML already turns unquoted ISO dates into date/datetime objects.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _parse_datetime(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def position_from_record(record: dict[str, Any]) -> Position:
    """Build a :class:`Position` from a stored record.

    Raises:
        ValueError: a field is missing or out of range.
    """
    ident = record.get("id", "<no id>")
    try:
        position = Position(
            id=str(record["id"]),
            institution=str(record["institution"]),
            regime=IndexRegime(record["regime"]),
            principal=float(record["principal"]),
            rate_parameter=float(record["rate_parameter"]),
            tax_rate=float(record.get("tax_rate", 0.0)),
            start_date=_parse_date(record["start_date"]),
            due_date=_parse_date(record["due_date"]),
            broker=str(record.get("broker") or ""),
            title=InvestmentTitle(record.get("title", InvestmentTitle.CDB.value)),
            quantity=int(record.get("quantity", 1)),
            gross_future_value=float(record.get("gross_future_value", 0.0)),
            net_future_value=float(record.get("net_future_value", 0.0)),
            created_at=_parse_datetime(record.get("created_at")),
        )
    except KeyError as e:
        raise ValueError(f"Position {ident!r} is missing field {e.args[0]!r}") from e
    except (TypeError, ValueError) as e:
        raise ValueError(f"Position {ident!r} is malformed: {e}") from e

    check_position(position)
    return position


def check_position(position: Position) -> None:
    """Range checks for a position entering the store."""
    if not position.institution.strip():
        raise ValueError(f"Position {position.id!r} has no institution")
    if position.principal <= 0:
        raise ValueError(f"Position {position.id!r} principal must be positive")
    if position.rate_parameter < 0:
        raise ValueError(f"Position {position.id!r} rate cannot be negative")
    if not 0 <= position.tax_rate <= MAX_TAX_RATE:
        raise ValueError(
            f"Position {position.id!r} tax rate must be between 0 and {MAX_TAX_RATE}"
        )
    if position.due_date <= position.start_date:
        raise ValueError(f"Position {position.id!r} matures before it starts")


def position_to_record(position: Position) -> dict[str, Any]:
    return {
        "id": position.id,
        "broker": position.broker,
        "institution": position.institution,
        "title": position.title.value,
        "regime": position.regime.value,
        "principal": position.principal,
        "quantity": position.quantity,
        "rate_parameter": position.rate_parameter,
        "tax_rate": position.tax_rate,
        "start_date": position.start_date.isoformat(),
        "due_date": position.due_date.isoformat(),
        "gross_future_value": position.gross_future_value,
        "net_future_value": position.net_future_value,
        "created_at": (
            position.created_at.isoformat() if position.created_at else None
        ),
    }


def _sort_key(position: Position) -> tuple[date, float]:
    created = position.created_at.timestamp() if position.created_at else 0.0
    return position.due_date, created


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class YamlPortfolioStore:
    """Implements both :class:`PositionStore` and :class:`MarketRatesStore`."""

    def __init__(self, path: str | Path, default_rates: MarketRates) -> None:
        self.path = Path(path)
        self.default_rates = default_rates

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a portfolio mapping")
        logger.debug("Loaded portfolio from %s", self.path)
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise
        logger.debug("Saved portfolio to %s", self.path)

    def _records(self, data: dict[str, Any]) -> list[dict[str, Any]]:
        return list(data.get("positions") or [])

    # -- positions ---------------------------------------------------------

    def list_positions(self) -> list[Position]:
        """All stored positions, earliest due date first."""
        positions = [position_from_record(r) for r in self._records(self._load())]
        return sorted(positions, key=_sort_key)

    def get_position(self, position_id: str) -> Position:
        for record in self._records(self._load()):
            if str(record.get("id")) == position_id:
                return position_from_record(record)
        raise KeyError(f"Unknown position: {position_id}")

    def add_position(self, position: Position) -> Position:
        check_position(position)
        data = self._load()
        records = self._records(data)
        if any(str(r.get("id")) == position.id for r in records):
            raise ValueError(f"Position {position.id!r} already exists")
        records.append(position_to_record(position))
        data["positions"] = records
        self._save(data)
        return position

    def update_position(self, position: Position) -> Position:
        check_position(position)
        data = self._load()
        records = self._records(data)
        for i, record in enumerate(records):
            if str(record.get("id")) == position.id:
                records[i] = position_to_record(position)
                break
        else:
            raise KeyError(f"Unknown position: {position.id}")
        data["positions"] = records
        self._save(data)
        return position

    def delete_position(self, position_id: str) -> bool:
        data = self._load()
        records = self._records(data)
        kept = [r for r in records if str(r.get("id")) != position_id]
        if len(kept) == len(records):
            return False
        data["positions"] = kept
        self._save(data)
        return True

    def replace_positions(self, positions: list[Position]) -> None:
        """Write the full position list in a single file replace."""
        for position in positions:
            check_position(position)
        data = self._load()
        data["positions"] = [position_to_record(p) for p in positions]
        self._save(data)

    # -- market rates ------------------------------------------------------

    def get_market_rates(self) -> MarketRates:
        raw = self._load().get("market_rates")
        if not raw:
            return self.default_rates
        try:
            return MarketRates(
                reference_index=float(raw["reference_index"]),
                inflation=float(raw["inflation"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed market_rates in {self.path}: {e}") from e

    def set_market_rates(self, rates: MarketRates) -> None:
        data = self._load()
        data["market_rates"] = {
            "reference_index": rates.reference_index,
            "inflation": rates.inflation,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        self._save(data)
