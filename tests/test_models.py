"""Tests for candle and report models."""

import math
from datetime import datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from marketpulse.errors import InsufficientDataError, InvalidCandleError
from marketpulse.models import Candle, CandleSeries, NewsItem, SupportResistanceBands
from marketpulse.models.news import hash_url

T0 = datetime(2024, 1, 1)


def make_candle(i: int = 0, open_: float = 100.0, high: float = 101.0,
                low: float = 99.0, close: float = 100.5) -> Candle:
    return Candle(timestamp=T0 + timedelta(days=i), open=open_, high=high, low=low, close=close)


class TestCandleValidation:
    """
    **Feature: market-pulse, Property 5: Candle Integrity**

    *For any* bar, high/low must bracket open/close and all prices must be finite.
    """

    @given(
        low=st.floats(min_value=1.0, max_value=1e5),
        spread=st.floats(min_value=0.0, max_value=1e4),
        open_frac=st.floats(min_value=0.0, max_value=1.0),
        close_frac=st.floats(min_value=0.0, max_value=1.0),
    )
    @settings(max_examples=100)
    def test_bracketed_candle_is_valid(self, low, spread, open_frac, close_frac):
        high = low + spread
        open_ = min(high, low + spread * open_frac)
        close = min(high, low + spread * close_frac)
        candle = make_candle(open_=open_, high=high, low=low, close=close)
        assert candle.low <= min(candle.open, candle.close)
        assert candle.high >= max(candle.open, candle.close)

    def test_high_below_low_rejected(self):
        with pytest.raises(InvalidCandleError):
            make_candle(open_=100, high=98, low=99, close=100)

    def test_close_outside_range_rejected(self):
        with pytest.raises(InvalidCandleError):
            make_candle(open_=100, high=101, low=99, close=102)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, bad):
        with pytest.raises(InvalidCandleError):
            make_candle(close=bad)

    @pytest.mark.parametrize("prices", [
        (0.0, 0.0, 0.0, 0.0),
        (1.0, 1.0, 0.0, 0.5),
        (-2.0, -1.0, -3.0, -2.0),
    ])
    def test_non_positive_price_rejected(self, prices):
        open_, high, low, close = prices
        with pytest.raises(InvalidCandleError):
            make_candle(open_=open_, high=high, low=low, close=close)

    def test_negative_volume_rejected(self):
        with pytest.raises(InvalidCandleError):
            Candle(timestamp=T0, open=100, high=101, low=99, close=100, volume=-1.0)

    def test_zero_volume_allowed(self):
        assert make_candle().volume == 0.0

    def test_zero_price_series_never_reaches_classifier(self, series_builder):
        with pytest.raises(InvalidCandleError):
            series_builder([(0.0, 0.0, 0.0, 0.0)] * 60)

    def test_candle_is_frozen(self):
        candle = make_candle()
        with pytest.raises(ValidationError):
            candle.close = 1.0


class TestCandleSeries:

    def test_timestamps_must_increase(self):
        with pytest.raises(InvalidCandleError):
            CandleSeries(symbol="BTCUSDT", interval="1d", candles=[make_candle(1), make_candle(0)])

    def test_duplicate_timestamps_rejected(self):
        with pytest.raises(InvalidCandleError):
            CandleSeries(symbol="BTCUSDT", interval="1d", candles=[make_candle(0), make_candle(0)])

    def test_accessors(self):
        candles = [make_candle(i, close=100 + i * 0.1) for i in range(5)]
        series = CandleSeries(symbol="BTCUSDT", interval="1d", candles=candles)

        assert len(series) == 5
        assert series.last == candles[-1]
        assert series.closes() == [c.close for c in candles]
        assert series.tail(2) == candles[-2:]
        assert series.tail(10) == candles
        assert series.tail(0) == []

    def test_require(self):
        series = CandleSeries(symbol="BTCUSDT", interval="1d", candles=[make_candle(0)])
        series.require(1, "test")
        with pytest.raises(InsufficientDataError) as exc_info:
            series.require(20, "market state")
        assert "market state requires at least 20 values, got 1" in str(exc_info.value)

    def test_empty_series_has_no_last(self):
        series = CandleSeries(symbol="BTCUSDT", interval="1d")
        with pytest.raises(InsufficientDataError):
            series.last


class TestSupportResistanceBands:

    def test_valid_bands(self):
        bands = SupportResistanceBands(resistance=(105.0, 110.0), support=(95.0, 90.0))
        assert bands.nearest_resistance == 105.0
        assert bands.nearest_support == 95.0

    def test_descending_resistance_rejected(self):
        with pytest.raises(ValidationError):
            SupportResistanceBands(resistance=(110.0, 105.0), support=(95.0, 90.0))

    def test_ascending_support_rejected(self):
        with pytest.raises(ValidationError):
            SupportResistanceBands(resistance=(105.0, 110.0), support=(90.0, 95.0))


class TestNewsItem:

    def test_url_hash_is_sha1_of_link(self):
        item = NewsItem(title="t", link="https://example.com/a", source="Test")
        assert item.url_hash == hash_url("https://example.com/a")
        assert len(item.url_hash) == 40

    @given(st.text(min_size=1, max_size=200))
    @settings(max_examples=50)
    def test_hash_is_deterministic(self, url: str):
        assert hash_url(url) == hash_url(url)
