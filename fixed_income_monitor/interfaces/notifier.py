"""Notifier protocol: delivery channel for exposure alerts and reports."""
from typing import Protocol


class Notifier(Protocol):
    """Abstract interface for sending notifications."""

    async def send_alert(self, message: str, subject: str = "") -> bool: ...

    async def send_report(self, message: str, subject: str = "") -> bool: ...
