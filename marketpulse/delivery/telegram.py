"""Telegram Bot API delivery channel."""

import logging
from typing import Optional

import requests

from marketpulse.config import TelegramConfig
from marketpulse.errors import DeliveryError

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.telegram.org"

# Telegram rejects longer messages
MAX_MESSAGE_LENGTH = 4096


class TelegramChannel:
    """Sends HTML-formatted messages to a single chat."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
    ):
        self.chat_id = chat_id
        self.session = session or requests.Session()
        self.timeout = timeout
        self._url = f"{API_BASE_URL}/bot{bot_token}/sendMessage"

    @classmethod
    def from_config(cls, config: TelegramConfig, timeout: float = 15.0) -> "TelegramChannel":
        return cls(bot_token=config.bot_token, chat_id=config.chat_id, timeout=timeout)

    def send(self, text: str) -> dict:
        """Send a message.

        Args:
            text: Message body in Telegram HTML.

        Returns:
            The Bot API response payload.

        Raises:
            DeliveryError: If the request fails or Telegram reports an error.
        """
        if len(text) > MAX_MESSAGE_LENGTH:
            raise DeliveryError(
                f"Message is {len(text)} characters, Telegram allows {MAX_MESSAGE_LENGTH}"
            )

        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        try:
            response = self.session.post(self._url, json=payload, timeout=self.timeout)
            data = response.json()
        except requests.RequestException as e:
            raise DeliveryError(f"Telegram request failed: {e}") from e
        except ValueError as e:
            raise DeliveryError(f"Telegram returned invalid JSON: {response.text[:300]}") from e

        if not data.get("ok"):
            raise DeliveryError(f"Telegram error: {str(data)[:300]}")

        logger.info("Delivered %d characters to chat %s", len(text), self.chat_id)
        return data
