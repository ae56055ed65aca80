"""Delivery channels for rendered messages."""

from marketpulse.delivery.telegram import TelegramChannel

__all__ = ["TelegramChannel"]
