"""Exposure monitoring: classifies deposit-insurance risk and notifies."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ..config import AppConfig
from ..formatting import format_currency, format_date, format_pct
from ..interfaces.notifier import Notifier
from ..models import ExposureReport, RiskLevel
from ..notifications import EmailNotifier, TelegramNotifier
from .portfolio_service import PortfolioService

logger = logging.getLogger(__name__)

_STATUS = {
    RiskLevel.SAFE: "✅ Safe",
    RiskLevel.WARNING: "⚠️ WARNING",
    RiskLevel.OVER: "🚨 OVER LIMIT",
}


class ExposureMonitor:
    """Checks portfolio exposure against the coverage ceilings and alerts."""

    def __init__(self, config: AppConfig, service: PortfolioService) -> None:
        self._config = config
        self._service = service

        self._notifiers: list[Notifier] = []
        if config.notifications.telegram.enabled:
            self._notifiers.append(TelegramNotifier(config.notifications.telegram))
        if config.notifications.email.enabled:
            self._notifiers.append(EmailNotifier(config.notifications.email))

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def _global_line(report: ExposureReport) -> str:
        return (
            f"Total gross: {format_currency(report.global_total)}"
            f" / {format_currency(report.global_limit)}"
            f" ({format_pct(report.global_usage_pct)})"
        )

    def _build_status_message(self, report: ExposureReport) -> str:
        return (
            f"🛡️ Coverage check\n"
            f"\n"
            f"{_STATUS[report.risk_level]}\n"
            f"\n"
            f"{self._global_line(report)}\n"
            f"Institutions: {report.institution_count}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

    def _build_alert(self, report: ExposureReport) -> str:
        lines = [
            f"{_STATUS[report.risk_level]}: coverage ceiling",
            "",
            self._global_line(report),
        ]
        if report.risk_level is RiskLevel.OVER:
            lines.append(
                f"Uncovered: {format_currency(report.uncovered_amount)}"
            )
        else:
            lines.append("Close to the global limit; consider other asset types.")

        over = report.institutions_over_limit()
        if over:
            lines.append("")
            lines.append(
                f"Above {format_currency(report.per_institution_limit)} per institution:"
            )
            lines.extend(
                f"  {e.institution}: {format_currency(e.total)}" for e in over
            )
        lines.extend(["", f"{self._now_str()} UTC"])
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _send_report(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_report(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_report failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    # ------------------------------------------------------------------
    # Core workflows
    # ------------------------------------------------------------------

    async def check_and_alert(self) -> ExposureReport:
        """Classify current exposure, report it, and alert above Safe."""
        report = self._service.exposure()

        level = logging.INFO if report.risk_level is RiskLevel.SAFE else logging.WARNING
        logger.log(
            level,
            "Exposure %s: total %.2f of %.2f across %d institutions",
            report.risk_level.value,
            report.global_total,
            report.global_limit,
            report.institution_count,
        )

        await self._send_report(self._build_status_message(report))

        if report.risk_level is RiskLevel.OVER:
            await self._send_alert(
                self._build_alert(report), subject="🚨 Coverage ceiling exceeded"
            )
        elif report.risk_level is RiskLevel.WARNING:
            await self._send_alert(
                self._build_alert(report), subject="⚠️ Close to coverage ceiling"
            )
        return report

    async def generate_report(self) -> str:
        """Send the per-institution exposure and portfolio summary report."""
        report = self._service.exposure()
        summary = self._service.summary()
        allocation = self._service.allocation()
        limit = report.per_institution_limit

        if report.institutions:
            rows = "\n".join(
                f"{e.institution}\n"
                f"  {format_currency(e.total)} · {format_pct(e.usage_pct(limit))}"
                f" of {format_currency(limit)}"
                + (" ⚠️" if e.exceeds(limit) else "")
                for e in report.institutions
            )
        else:
            rows = "No institutions found."

        if allocation:
            allocation_rows = "\n".join(
                f"  {regime.value}: {format_currency(amount)}"
                f" ({format_pct(amount / summary.total_invested * 100.0)})"
                for regime, amount in allocation.items()
            )
        else:
            allocation_rows = "  None"

        message = (
            f"📋 Fixed-Income Portfolio Report\n"
            f"\n"
            f"Invested: {format_currency(summary.total_invested)}\n"
            f"Net at maturity: {format_currency(summary.total_net_future)}"
            f" ({format_pct(summary.projected_return_pct)})\n"
            f"Next maturity: {format_date(summary.next_due_date)}\n"
            f"Positions: {summary.position_count}\n"
            f"\n"
            f"Allocation by index:\n"
            f"{allocation_rows}\n"
            f"\n"
            f"{_STATUS[report.risk_level]} · {self._global_line(report)}\n"
            f"\n"
            f"{rows}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

        await self._send_report(message, subject="Fixed-income portfolio report")
        logger.info("Portfolio report sent")
        return message

    async def run_continuous(self, check_interval_minutes: int | None = None) -> None:
        """Run continuous monitoring loop."""
        interval = check_interval_minutes or self._config.monitor.check_interval_minutes
        logger.info(
            "Starting continuous monitoring (checking every %d minutes)", interval
        )

        while True:
            try:
                await self.check_and_alert()
                await asyncio.sleep(interval * 60)
            except Exception as e:
                logger.error("Error in monitoring loop: %s", e)
                await asyncio.sleep(60)
