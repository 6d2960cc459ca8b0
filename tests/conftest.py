"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from fixed_income_monitor.config import (
    AppConfig,
    CoverageConfig,
    EmailConfig,
    MarketDefaultsConfig,
    MonitorConfig,
    NotificationsConfig,
    StorageConfig,
    TelegramConfig,
)
from fixed_income_monitor.models import (
    IndexRegime,
    InvestmentTitle,
    MarketRates,
    Position,
)
from fixed_income_monitor.services import PortfolioService
from fixed_income_monitor.storage import YamlPortfolioStore


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_rates() -> MarketRates:
    return MarketRates(reference_index=12.0, inflation=4.5)


@pytest.fixture()
def make_position() -> Callable[..., Position]:
    """Factory for positions; keyword overrides replace the defaults."""

    def _make(**overrides: Any) -> Position:
        fields: dict[str, Any] = {
            "id": "pos-1",
            "institution": "Banco X",
            "regime": IndexRegime.POST_FIXED,
            "principal": 10000.0,
            "rate_parameter": 100.0,
            "tax_rate": 15.0,
            "start_date": date(2025, 1, 1),
            "due_date": date(2026, 1, 1),
            "broker": "XP",
            "title": InvestmentTitle.CDB,
            "quantity": 1,
            "created_at": datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return Position(**fields)

    return _make


@pytest.fixture()
def sample_position(make_position: Callable[..., Position]) -> Position:
    return make_position()


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        coverage=CoverageConfig(
            global_limit=1_000_000.0,
            per_institution_limit=250_000.0,
            warning_ratio=0.8,
        ),
        market_defaults=MarketDefaultsConfig(reference_index=11.25, inflation=4.5),
        storage=StorageConfig(path=tmp_path / "portfolio.yaml"),
        monitor=MonitorConfig(check_interval_minutes=5),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True, bot_token="fake-token", chat_id="12345"
            ),
            email=EmailConfig(enabled=False),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    coverage:
      global_limit: 1000000
      per_institution_limit: 250000
      warning_ratio: 0.8
    market_defaults:
      reference_index: 11.25
      inflation: 4.5
    storage:
      path: data/portfolio.yaml
    monitor:
      check_interval_minutes: 30
    notifications:
      telegram:
        enabled: true
        bot_token: "tok1"
        chat_id: "999"
      email:
        enabled: false
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Store / service fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store(tmp_path: Path) -> YamlPortfolioStore:
    return YamlPortfolioStore(
        tmp_path / "portfolio.yaml",
        MarketRates(reference_index=11.25, inflation=4.5),
    )


@pytest.fixture()
def service(store: YamlPortfolioStore) -> PortfolioService:
    return PortfolioService(store, store, CoverageConfig())
