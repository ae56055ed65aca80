"""Candle (OHLCV) and candle series data models."""

import math
from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from marketpulse.errors import InsufficientDataError, InvalidCandleError


class Candle(BaseModel):
    """Represents a single OHLCV candle."""

    timestamp: datetime = Field(..., description="Candle open time")
    open: float = Field(..., description="Opening price")
    high: float = Field(..., description="High price")
    low: float = Field(..., description="Low price")
    close: float = Field(..., description="Closing price")
    volume: float = Field(default=0.0, description="Traded base volume")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_prices(self) -> "Candle":
        values = (self.open, self.high, self.low, self.close, self.volume)
        if not all(math.isfinite(v) for v in values):
            raise InvalidCandleError(f"Non-finite value in candle at {self.timestamp}")
        if min(self.open, self.high, self.low, self.close) <= 0:
            raise InvalidCandleError(f"Non-positive price in candle at {self.timestamp}")
        if self.volume < 0:
            raise InvalidCandleError(f"Negative volume in candle at {self.timestamp}")
        if self.high < self.low:
            raise InvalidCandleError(
                f"High {self.high} below low {self.low} at {self.timestamp}"
            )
        if self.high < max(self.open, self.close) or self.low > min(self.open, self.close):
            raise InvalidCandleError(
                f"High/low do not bracket open/close at {self.timestamp}"
            )
        return self


class CandleSeries(BaseModel):
    """Ordered, immutable candles for one symbol and interval.

    Candles run oldest to newest with strictly increasing timestamps.
    """

    symbol: str = Field(..., min_length=1, description="Trading symbol")
    interval: str = Field(..., min_length=1, description="Candle interval, e.g. 1d or 4h")
    candles: tuple[Candle, ...] = Field(default=(), description="Candles, oldest first")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "CandleSeries":
        for prev, cur in zip(self.candles, self.candles[1:]):
            if cur.timestamp <= prev.timestamp:
                raise InvalidCandleError(
                    f"{self.symbol} {self.interval}: timestamp {cur.timestamp} "
                    f"does not follow {prev.timestamp}"
                )
        return self

    def __len__(self) -> int:
        return len(self.candles)

    @property
    def last(self) -> Candle:
        """Most recent candle."""
        if not self.candles:
            raise InsufficientDataError("last candle", 1, 0)
        return self.candles[-1]

    def closes(self) -> list[float]:
        return [c.close for c in self.candles]

    def highs(self) -> list[float]:
        return [c.high for c in self.candles]

    def lows(self) -> list[float]:
        return [c.low for c in self.candles]

    def tail(self, n: int) -> list[Candle]:
        """Return the last ``n`` candles (fewer if the series is shorter)."""
        return list(self.candles[-n:]) if n > 0 else []

    def require(self, minimum: int, indicator: str) -> None:
        """Raise InsufficientDataError if the series is shorter than ``minimum``."""
        if len(self.candles) < minimum:
            raise InsufficientDataError(indicator, minimum, len(self.candles))
