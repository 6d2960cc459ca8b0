"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .engine import GLOBAL_LIMIT, PER_INSTITUTION_LIMIT, WARNING_RATIO
from .models import MarketRates

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CoverageConfig:
    global_limit: float = GLOBAL_LIMIT
    per_institution_limit: float = PER_INSTITUTION_LIMIT
    warning_ratio: float = WARNING_RATIO


@dataclass(frozen=True)
class MarketDefaultsConfig:
    reference_index: float = 11.25
    inflation: float = 4.5

    def as_rates(self) -> MarketRates:
        return MarketRates(
            reference_index=self.reference_index, inflation=self.inflation
        )


@dataclass(frozen=True)
class StorageConfig:
    path: Path = Path("portfolio.yaml")


@dataclass(frozen=True)
class MonitorConfig:
    check_interval_minutes: int = 60


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class EmailConfig:
    enabled: bool = False
    alert_email: str = ""
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    sender_email: str = ""
    sender_password: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    email: EmailConfig = field(default_factory=EmailConfig)


@dataclass(frozen=True)
class AppConfig:
    coverage: CoverageConfig = field(default_factory=CoverageConfig)
    market_defaults: MarketDefaultsConfig = field(default_factory=MarketDefaultsConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_coverage(raw: dict[str, Any]) -> CoverageConfig:
    return CoverageConfig(
        global_limit=float(raw.get("global_limit", GLOBAL_LIMIT)),
        per_institution_limit=float(
            raw.get("per_institution_limit", PER_INSTITUTION_LIMIT)
        ),
        warning_ratio=float(raw.get("warning_ratio", WARNING_RATIO)),
    )


def _build_market_defaults(raw: dict[str, Any]) -> MarketDefaultsConfig:
    return MarketDefaultsConfig(
        reference_index=float(raw.get("reference_index", 11.25)),
        inflation=float(raw.get("inflation", 4.5)),
    )


def _build_storage(raw: dict[str, Any], base_dir: Path) -> StorageConfig:
    path = Path(raw.get("path") or "portfolio.yaml").expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return StorageConfig(path=path)


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        check_interval_minutes=int(raw.get("check_interval_minutes", 60)),
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram") or {}
    em = raw.get("email") or {}
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            bot_token=str(tg.get("bot_token", "")),
            chat_id=str(tg.get("chat_id", "")),
        ),
        email=EmailConfig(
            enabled=bool(em.get("enabled", False)),
            alert_email=em.get("alert_email", ""),
            smtp_server=em.get("smtp_server", "smtp.gmail.com"),
            smtp_port=int(em.get("smtp_port", 587)),
            sender_email=em.get("sender_email", ""),
            sender_password=em.get("sender_password", ""),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            current working directory.
    """
    load_dotenv()

    if config_path is None:
        config_path = Path.cwd() / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        coverage=_build_coverage(raw.get("coverage") or {}),
        market_defaults=_build_market_defaults(raw.get("market_defaults") or {}),
        storage=_build_storage(
            raw.get("storage") or {}, config_path.resolve().parent
        ),
        monitor=_build_monitor(raw.get("monitor") or {}),
        notifications=_build_notifications(raw.get("notifications") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    coverage = cfg.coverage
    if coverage.global_limit <= 0:
        raise ValueError("coverage.global_limit must be positive")
    if coverage.per_institution_limit <= 0:
        raise ValueError("coverage.per_institution_limit must be positive")
    if coverage.per_institution_limit > coverage.global_limit:
        raise ValueError(
            "coverage.per_institution_limit cannot exceed coverage.global_limit"
        )
    if not 0 < coverage.warning_ratio < 1:
        raise ValueError("coverage.warning_ratio must be between 0 and 1")
    if cfg.monitor.check_interval_minutes < 1:
        raise ValueError("monitor.check_interval_minutes must be at least 1")
