"""Binance public REST API market data provider."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from marketpulse.errors import UpstreamFetchError
from marketpulse.models import Candle, CandleSeries
from marketpulse.providers.base import BaseMarketDataProvider

logger = logging.getLogger(__name__)

SPOT_BASE_URL = "https://api.binance.com"
FUTURES_BASE_URL = "https://fapi.binance.com"

VALID_INTERVALS = ["1m", "5m", "15m", "30m", "1h", "2h", "4h", "6h", "12h", "1d", "1w"]

# Kline array positions
K_OPEN_TIME = 0
K_OPEN = 1
K_HIGH = 2
K_LOW = 3
K_CLOSE = 4
K_VOLUME = 5
K_QUOTE_VOLUME = 7
K_TAKER_BUY_QUOTE = 10


def kline_to_candle(row: list) -> Candle:
    """Convert a raw Binance kline array into a Candle."""
    return Candle(
        timestamp=datetime.fromtimestamp(row[K_OPEN_TIME] / 1000, tz=timezone.utc),
        open=float(row[K_OPEN]),
        high=float(row[K_HIGH]),
        low=float(row[K_LOW]),
        close=float(row[K_CLOSE]),
        volume=float(row[K_VOLUME]),
    )


class BinanceProvider(BaseMarketDataProvider):
    """Candle and derivatives data from Binance public endpoints.

    No API key is needed. One ``requests.Session`` is reused for all calls.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
        spot_base_url: str = SPOT_BASE_URL,
        futures_base_url: str = FUTURES_BASE_URL,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.spot_base_url = spot_base_url
        self.futures_base_url = futures_base_url

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            response = self.session.get(
                url,
                params=params,
                headers={"accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamFetchError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            raise UpstreamFetchError(
                f"HTTP {response.status_code} from {url}: {response.text[:300]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Invalid JSON from {url}: {response.text[:300]}") from e

    def get_klines(self, symbol: str, interval: str, limit: int = 200) -> list[list]:
        """Get raw kline arrays, oldest first.

        Raises:
            ValueError: If the interval is not supported.
            UpstreamFetchError: If the request fails or returns a non-list.
        """
        if interval not in VALID_INTERVALS:
            raise ValueError(f"Invalid interval: {interval}. Must be one of {VALID_INTERVALS}")

        logger.debug("Fetching %d %s klines for %s", limit, interval, symbol)
        data = self._get_json(
            f"{self.spot_base_url}/api/v3/klines",
            {"symbol": symbol, "interval": interval, "limit": limit},
        )
        if not isinstance(data, list):
            raise UpstreamFetchError(f"Unexpected klines payload for {symbol}: {str(data)[:300]}")
        return data

    def get_series(self, symbol: str, interval: str, limit: int = 220) -> CandleSeries:
        """Get recent candles as a CandleSeries."""
        rows = self.get_klines(symbol, interval, limit)
        try:
            candles = [kline_to_candle(row) for row in rows]
        except (IndexError, TypeError, ValueError) as e:
            raise UpstreamFetchError(f"Malformed kline for {symbol}: {e}") from e
        return CandleSeries(symbol=symbol, interval=interval, candles=candles)

    def get_open_interest(self, symbol: str) -> Optional[float]:
        """Current futures open interest (contracts)."""
        data = self._get_json(
            f"{self.futures_base_url}/fapi/v1/openInterest", {"symbol": symbol}
        )
        return _to_float(data.get("openInterest")) if isinstance(data, dict) else None

    def get_funding_rate(self, symbol: str) -> Optional[float]:
        """Last futures funding rate in percent."""
        data = self._get_json(
            f"{self.futures_base_url}/fapi/v1/premiumIndex", {"symbol": symbol}
        )
        rate = _to_float(data.get("lastFundingRate")) if isinstance(data, dict) else None
        return rate * 100 if rate is not None else None


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
