"""Base market data provider interface for MarketPulse."""

from abc import ABC, abstractmethod

from marketpulse.models import CandleSeries


class BaseMarketDataProvider(ABC):
    """Abstract base class for candle data sources.

    Implementations return candles ordered oldest to newest and never retry
    on failure; retry policy belongs to the caller's scheduler.
    """

    @abstractmethod
    def get_series(self, symbol: str, interval: str, limit: int = 220) -> CandleSeries:
        """Get the most recent candles for a symbol.

        Args:
            symbol: Trading symbol (e.g., BTCUSDT).
            interval: Candle interval (e.g., 1d, 4h, 1h).
            limit: Number of candles to fetch.

        Returns:
            CandleSeries ordered oldest first.

        Raises:
            UpstreamFetchError: If the data source fails.
            InvalidCandleError: If the source returns a malformed bar.
        """
        pass
