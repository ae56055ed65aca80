"""Market regime classification.

A pure decision procedure over the last daily candle and the trailing
20-bar window. Rules are checked in a fixed order and the first match wins.
"""

from typing import Optional

from marketpulse.indicators.technical import calculate_ema
from marketpulse.models import CandleSeries, MarketState, RegimeResult

WINDOW = 20
EMA_PERIOD = 20
SLOPE_LOOKBACK = 5

BREAKOUT_PROXIMITY = 0.998
BREAKDOWN_PROXIMITY = 1.002
MIN_BODY_PCT = 0.6

TIGHT_RANGE_PCT = 6.0
FLAT_SLOPE_PCT = 0.35
LOW_ATR_PCT = 3.5

WEAK_SLOPE_PCT = 0.1
HIGH_ATR_PCT = 4.0

RATIONALES = {
    MarketState.BREAKOUT: "Close at or above the 20-session high with a decisive body",
    MarketState.BREAKDOWN: "Close at or below the 20-session low with a decisive body",
    MarketState.ACCUMULATION: "Narrow range with a flat EMA or low volatility; wait for the break",
    MarketState.DISTRIBUTION: "Momentum fading while volatility expands; expect two-sided whipsaws",
    MarketState.NEUTRAL: "No clear pattern yet; trade the reaction at key levels",
}


def _result(state: MarketState) -> RegimeResult:
    return RegimeResult(state=state, rationale=RATIONALES[state])


def ema_slope_percent(closes: list[float]) -> float:
    """Percent change of EMA20 over the last five bars (0 if the base is 0)."""
    ema20 = calculate_ema(closes, EMA_PERIOD)
    now = ema20[-1]
    prev = ema20[-1 - SLOPE_LOOKBACK]
    if not prev:
        return 0.0
    return (now - prev) / prev * 100


def detect_market_state(
    daily: CandleSeries,
    ema50: float,
    atr: Optional[float],
) -> RegimeResult:
    """Label the current market regime.

    Args:
        daily: Daily candle series, oldest first
        ema50: Daily EMA(50) for the last bar
        atr: Daily ATR(14) for the last bar

    Returns:
        RegimeResult with the matched state and its rationale.

    Raises:
        InsufficientDataError: If fewer than 20 daily candles are given.
    """
    daily.require(WINDOW, "market state")

    last = daily.last
    window = daily.tail(WINDOW)

    max_high = max(c.high for c in window)
    min_low = min(c.low for c in window)

    range_pct = (max_high - min_low) / last.close * 100
    atr_pct = atr / last.close * 100 if atr else 0.0
    slope_pct = ema_slope_percent(daily.closes())
    body_pct = abs(last.close - last.open) / last.close * 100

    if last.close >= max_high * BREAKOUT_PROXIMITY and body_pct >= MIN_BODY_PCT:
        return _result(MarketState.BREAKOUT)

    if last.close <= min_low * BREAKDOWN_PROXIMITY and body_pct >= MIN_BODY_PCT:
        return _result(MarketState.BREAKDOWN)

    tight_range = range_pct <= TIGHT_RANGE_PCT
    ema_flat = abs(slope_pct) <= FLAT_SLOPE_PCT
    low_vol = atr_pct <= LOW_ATR_PCT

    if (tight_range and ema_flat) or (tight_range and low_vol):
        return _result(MarketState.ACCUMULATION)

    above_ema = last.close >= ema50
    ema_weak = slope_pct < WEAK_SLOPE_PCT
    vol_expanding = atr_pct >= HIGH_ATR_PCT

    if above_ema and ema_weak and vol_expanding:
        return _result(MarketState.DISTRIBUTION)

    return _result(MarketState.NEUTRAL)
