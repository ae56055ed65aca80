"""Technical indicator calculations for market-structure analysis.

All functions are pure: they take plain price lists (or candles) and return
lists aligned with the input. Positions an indicator cannot define yet are
``None``. A series shorter than the lookback raises InsufficientDataError
instead of returning partial output.
"""

from typing import Optional, Sequence

from marketpulse.errors import InsufficientDataError
from marketpulse.models import Candle, SupportResistanceBands


def calculate_ema(prices: Sequence[float], period: int) -> list[float]:
    """Calculate Exponential Moving Average.

    The first output equals the first price rather than an SMA warm-up, so
    early values lean towards the start of the series. Only the latest value
    is consumed by the analysis, where the difference has decayed.

    Args:
        prices: List of price values
        period: Number of periods for the EMA

    Returns:
        List of EMA values, same length as ``prices``.
    """
    if period < 1:
        raise ValueError(f"EMA period must be positive, got {period}")
    if len(prices) < period:
        raise InsufficientDataError(f"EMA{period}", period, len(prices))

    multiplier = 2 / (period + 1)
    result = [float(prices[0])]

    for price in prices[1:]:
        result.append(price * multiplier + result[-1] * (1 - multiplier))

    return result


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    return 100 - (100 / (1 + avg_gain / avg_loss))


def calculate_rsi(prices: Sequence[float], period: int = 14) -> list[Optional[float]]:
    """Calculate Relative Strength Index with Wilder's smoothing.

    The first ``period`` price changes seed the average gain and loss. RSI is
    100 whenever the average loss is exactly zero.

    Args:
        prices: List of price values (typically close prices)
        period: RSI period (default 14)

    Returns:
        List of RSI values (0-100). The first ``period`` entries are None.
    """
    if period < 1:
        raise ValueError(f"RSI period must be positive, got {period}")
    if len(prices) < period + 1:
        raise InsufficientDataError(f"RSI{period}", period + 1, len(prices))

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = prices[i] - prices[i - 1]
        if change >= 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / period
    avg_loss = losses / period

    result: list[Optional[float]] = [None] * period
    result.append(_rsi_from_averages(avg_gain, avg_loss))

    for i in range(period + 1, len(prices)):
        change = prices[i] - prices[i - 1]
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        result.append(_rsi_from_averages(avg_gain, avg_loss))

    return result


def true_ranges(candles: Sequence[Candle]) -> list[float]:
    """True range of every candle after the first."""
    return [
        max(
            cur.high - cur.low,
            abs(cur.high - prev.close),
            abs(cur.low - prev.close),
        )
        for prev, cur in zip(candles, candles[1:])
    ]


def calculate_atr(candles: Sequence[Candle], period: int = 14) -> list[Optional[float]]:
    """Calculate Average True Range.

    Args:
        candles: Candles ordered oldest first
        period: ATR period (default 14)

    Returns:
        List of ATR values. The first ``period`` entries are None.
    """
    if period < 1:
        raise ValueError(f"ATR period must be positive, got {period}")
    if len(candles) < period + 1:
        raise InsufficientDataError(f"ATR{period}", period + 1, len(candles))

    ranges = true_ranges(candles)

    # First ATR is SMA of first `period` true ranges
    atr = sum(ranges[:period]) / period
    result: list[Optional[float]] = [None] * period
    result.append(atr)

    # Subsequent ATRs using Wilder's smoothing
    for tr in ranges[period:]:
        atr = (atr * (period - 1) + tr) / period
        result.append(atr)

    return result


def calculate_swing_levels(
    candles: Sequence[Candle],
    lookback: int = 60,
) -> SupportResistanceBands:
    """Calculate two-tier support and resistance around the recent extremes.

    Resistance is the highest high of the window and the midpoint between it
    and the last close; support mirrors that with the lowest low.

    Args:
        candles: Candles ordered oldest first
        lookback: Number of trailing candles to scan (default 60)

    Returns:
        SupportResistanceBands, nearest level first on each side.
    """
    if len(candles) < lookback:
        raise InsufficientDataError("swing levels", lookback, len(candles))

    window = candles[-lookback:]
    hi = max(c.high for c in window)
    lo = min(c.low for c in window)
    last_close = candles[-1].close

    resistance = sorted([hi, (hi + last_close) / 2])
    support = sorted([lo, (lo + last_close) / 2], reverse=True)

    return SupportResistanceBands(
        resistance=(resistance[0], resistance[1]),
        support=(support[0], support[1]),
    )


def last_value(values: Sequence[Optional[float]]) -> float:
    """Return the final value of an indicator series.

    Raises:
        InsufficientDataError: If the series has no defined final value.
    """
    if not values or values[-1] is None:
        raise InsufficientDataError("indicator value", 1, 0)
    return values[-1]
