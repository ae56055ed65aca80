"""Shared candle fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from marketpulse.models import Candle, CandleSeries

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_series(bars: list[tuple[float, float, float, float]], interval: str = "1d",
                 symbol: str = "BTCUSDT") -> CandleSeries:
    """Build a series from (open, high, low, close) tuples."""
    step = timedelta(days=1) if interval == "1d" else timedelta(hours=4)
    candles = [
        Candle(timestamp=T0 + step * i, open=o, high=h, low=l, close=c, volume=1000.0)
        for i, (o, h, l, c) in enumerate(bars)
    ]
    return CandleSeries(symbol=symbol, interval=interval, candles=candles)


def rising_bars(count: int, start: float = 100.0, end: float = 160.0) -> list[tuple]:
    """Linear climb with a 1-point bullish body and a half-point lower wick."""
    bars = []
    for i in range(count):
        close = start + (end - start) * i / (count - 1)
        open_ = close - 1
        bars.append((open_, close, open_ - 0.5, close))
    return bars


@pytest.fixture
def series_builder():
    return build_series


@pytest.fixture
def breakout_daily() -> CandleSeries:
    """60 daily candles rising 100 -> 160, last body ~0.63%."""
    return build_series(rising_bars(60))


@pytest.fixture
def rising_h4() -> CandleSeries:
    return build_series(rising_bars(50, 140.0, 160.0), interval="4h")


@pytest.fixture
def rising_series():
    """Factory for linear-climb series of a given length."""
    def _build(count: int, interval: str = "1d") -> CandleSeries:
        return build_series(rising_bars(count), interval=interval)
    return _build
