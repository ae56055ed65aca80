"""Market data providers."""

from marketpulse.providers.base import BaseMarketDataProvider
from marketpulse.providers.binance import BinanceProvider

__all__ = ["BaseMarketDataProvider", "BinanceProvider"]
