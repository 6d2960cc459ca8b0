"""Telegram notification channel."""
import logging
import ssl

import aiohttp
import certifi

from ..config import TelegramConfig

logger = logging.getLogger(__name__)

API_URL = "https://api.telegram.org/bot{token}/sendMessage"


class TelegramNotifier:
    """Send alerts and reports to a Telegram chat through one bot."""

    def __init__(self, config: TelegramConfig) -> None:
        self.bot_token = config.bot_token
        self.chat_id = config.chat_id

    async def _post(self, text: str, silent: bool) -> bool:
        if not self.bot_token or not self.chat_id:
            logger.warning("Telegram bot token or chat id not configured")
            return False

        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "disable_notification": silent,
        }
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                API_URL.format(token=self.bot_token), json=payload
            ) as response:
                if response.status != 200:
                    logger.error("Telegram sendMessage failed: HTTP %s", response.status)
                    return False
                return True

    @staticmethod
    def _with_subject(message: str, subject: str) -> str:
        return f"{subject}\n\n{message}" if subject else message

    async def send_alert(self, message: str, subject: str = "") -> bool:
        """Send an alert with notification sound."""
        sent = await self._post(self._with_subject(message, subject), silent=False)
        if sent:
            logger.info("Telegram alert sent")
        return sent

    async def send_report(self, message: str, subject: str = "") -> bool:
        """Send a routine report silently."""
        sent = await self._post(self._with_subject(message, subject), silent=True)
        if sent:
            logger.info("Telegram report sent")
        return sent
