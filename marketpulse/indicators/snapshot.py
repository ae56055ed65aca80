"""Indicator snapshots computed from a candle series."""

from marketpulse.indicators.technical import (
    calculate_atr,
    calculate_ema,
    calculate_rsi,
    last_value,
)
from marketpulse.models import CandleSeries, HigherTimeframeTrend, IndicatorSnapshot

EMA_FAST = 20
EMA_SLOW = 50
RSI_PERIOD = 14
ATR_PERIOD = 14
SLOPE_LOOKBACK = 5
SWING_LOOKBACK = 60

# Longest lookback among the snapshot indicators
SNAPSHOT_MIN_CANDLES = max(EMA_SLOW, EMA_FAST + SLOPE_LOOKBACK, RSI_PERIOD + 1, ATR_PERIOD + 1)


def compute_snapshot(series: CandleSeries) -> IndicatorSnapshot:
    """Compute EMA20, EMA50, RSI14 and ATR14 for the last bar of a series.

    Args:
        series: Candle series, oldest first.

    Returns:
        IndicatorSnapshot for the most recent candle.

    Raises:
        InsufficientDataError: If the series is shorter than the EMA50 lookback.
    """
    series.require(SNAPSHOT_MIN_CANDLES, f"{series.symbol} {series.interval} snapshot")

    closes = series.closes()
    ema20 = calculate_ema(closes, EMA_FAST)

    return IndicatorSnapshot(
        close=closes[-1],
        ema20=ema20[-1],
        ema20_prev=ema20[-1 - SLOPE_LOOKBACK],
        ema50=calculate_ema(closes, EMA_SLOW)[-1],
        rsi14=last_value(calculate_rsi(closes, RSI_PERIOD)),
        atr14=last_value(calculate_atr(series.candles, ATR_PERIOD)),
    )


def higher_timeframe_trend(snapshot: IndicatorSnapshot) -> HigherTimeframeTrend:
    """Classify the 4-hour trend from its close relative to EMA50."""
    if snapshot.close > snapshot.ema50:
        return HigherTimeframeTrend.UP
    if snapshot.close < snapshot.ema50:
        return HigherTimeframeTrend.DOWN
    return HigherTimeframeTrend.SIDE
