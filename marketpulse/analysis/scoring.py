"""Price-action scoring.

Additive point system on a 0-10 scale starting from a neutral 5. The
thresholds and weights are fixed empirical cutoffs.
"""

from typing import Optional, Union

from marketpulse.models import HigherTimeframeTrend, Momentum

BASELINE = 5.0
SCORE_MIN = 0.0
SCORE_MAX = 10.0

RSI_BULLISH = 60
RSI_BEARISH = 40

VOL_HIGH_PCT = 6.0
VOL_LOW_PCT = 3.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def volatility_percent(atr: Optional[float], close: float) -> float:
    """ATR as a percentage of price; 0 when ATR is missing or zero."""
    if not atr:
        return 0.0
    return atr / close * 100


def momentum_label(rsi14: float) -> Momentum:
    """Momentum label for an RSI(14) reading."""
    if rsi14 >= RSI_BULLISH:
        return Momentum.BULLISH
    if rsi14 <= RSI_BEARISH:
        return Momentum.BEARISH
    return Momentum.NEUTRAL


def score_price_action(
    close: float,
    ema50: float,
    rsi14: float,
    atr14: Optional[float],
    h4_trend: Union[HigherTimeframeTrend, str],
) -> float:
    """Score price action from 0 (weak) to 10 (strong).

    Args:
        close: Last daily close
        ema50: Daily EMA(50)
        rsi14: Daily RSI(14)
        atr14: Daily ATR(14)
        h4_trend: Higher-timeframe confirmation ("up", "down" or "side")

    Returns:
        Score clamped to [0, 10].
    """
    score = BASELINE

    # Trend: equality counts as not above
    if close > ema50:
        score += 2
    else:
        score -= 2

    # Momentum
    if rsi14 >= RSI_BULLISH:
        score += 1.5
    elif rsi14 <= RSI_BEARISH:
        score -= 1.5

    # Volatility
    vol_pct = volatility_percent(atr14, close)
    if vol_pct >= VOL_HIGH_PCT:
        score -= 1
    elif vol_pct <= VOL_LOW_PCT:
        score += 0.5

    # Higher-timeframe confirmation
    trend = HigherTimeframeTrend(h4_trend)
    if trend is HigherTimeframeTrend.UP:
        score += 1
    elif trend is HigherTimeframeTrend.DOWN:
        score -= 1

    return clamp(score, SCORE_MIN, SCORE_MAX)
