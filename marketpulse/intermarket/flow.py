"""Intermarket flow metrics and their textual conclusions.

Metrics are computed from raw Binance kline arrays: the H4 view uses the
last four 1-hour klines, the range view uses the last closed daily kline.
"""

import math
from enum import Enum
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from marketpulse.errors import InsufficientDataError
from marketpulse.providers.binance import (
    K_CLOSE,
    K_HIGH,
    K_LOW,
    K_QUOTE_VOLUME,
    K_TAKER_BUY_QUOTE,
)

H4_BARS = 4

BUYERS_DOMINATE_PCT = 58
SELLERS_DOMINATE_PCT = 42

NARROW_RANGE_PCT = 2.0
WIDE_RANGE_PCT = 4.0

LOW_FEE = 15
MODERATE_FEE = 40
ELEVATED_FEE = 80

BTC_FLAT_PCT = 0.30
GOLD_STRONG_PCT = 0.50


class RangeState(str, Enum):
    NARROW = "NARROW"
    NORMAL = "NORMAL"
    WIDE = "WIDE"


class H4Summary(BaseModel):
    close_now: Optional[float] = None
    pct_h4: Optional[float] = None
    quote_volume_h4: float = 0.0

    model_config = {"frozen": True}


class BuySellFlow(BaseModel):
    buy_quote: float = Field(..., ge=0)
    sell_quote: float = Field(..., ge=0)
    total_quote: float = Field(..., ge=0)
    delta: float
    buy_pct: Optional[float] = None

    model_config = {"frozen": True}


class DailyRange(BaseModel):
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    range_pct: Optional[float] = None
    state: RangeState = RangeState.NORMAL

    model_config = {"frozen": True}


class LiquidityShift(BaseModel):
    shift: bool
    text: str

    model_config = {"frozen": True}


def _num(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _last_h4(klines: Sequence[list], label: str) -> Sequence[list]:
    if len(klines) < H4_BARS:
        raise InsufficientDataError(label, H4_BARS, len(klines))
    return klines[-H4_BARS:]


def summarize_h4(klines: Sequence[list]) -> H4Summary:
    """Close, percent change and quote volume over the last four hours."""
    window = _last_h4(klines, "H4 summary")
    closes = [c for c in (_num(k[K_CLOSE]) for k in window) if c is not None]
    volumes = [v for v in (_num(k[K_QUOTE_VOLUME]) for k in window) if v is not None]

    close_now = closes[-1] if closes else None
    close_prev = closes[0] if closes else None
    pct = None
    if close_now is not None and close_prev:
        pct = (close_now / close_prev - 1) * 100

    return H4Summary(close_now=close_now, pct_h4=pct, quote_volume_h4=sum(volumes))


def buy_sell_flow(klines: Sequence[list]) -> BuySellFlow:
    """Taker buy/sell quote volume over the last four hours."""
    window = _last_h4(klines, "H4 flow")
    total = sum(_num(k[K_QUOTE_VOLUME]) or 0.0 for k in window)
    buy = sum(_num(k[K_TAKER_BUY_QUOTE]) or 0.0 for k in window)
    sell = max(0.0, total - buy)

    return BuySellFlow(
        buy_quote=buy,
        sell_quote=sell,
        total_quote=total,
        delta=buy - sell,
        buy_pct=buy / total * 100 if total > 0 else None,
    )


def daily_range(klines: Sequence[list]) -> DailyRange:
    """Range of the last closed daily candle (the newest kline is still open)."""
    if len(klines) < 2:
        raise InsufficientDataError("1D range", 2, len(klines))

    closed = klines[-2]
    high = _num(closed[K_HIGH])
    low = _num(closed[K_LOW])
    close = _num(closed[K_CLOSE])

    range_pct = None
    if high is not None and low is not None and close:
        range_pct = (high - low) / close * 100

    state = RangeState.NORMAL
    if range_pct is not None:
        if range_pct < NARROW_RANGE_PCT:
            state = RangeState.NARROW
        elif range_pct > WIDE_RANGE_PCT:
            state = RangeState.WIDE

    return DailyRange(high=high, low=low, close=close, range_pct=range_pct, state=state)


def flow_conclusion(flow: BuySellFlow) -> str:
    if flow.buy_pct is None:
        return "Not enough data to judge the flow."
    if flow.buy_pct >= BUYERS_DOMINATE_PCT:
        return "Aggressive buyers dominate → better short-term upside drive."
    if flow.buy_pct <= SELLERS_DOMINATE_PCT:
        return "Aggressive sellers dominate → watch for short-term selling pressure."
    if abs(flow.delta) < 0.02 * (abs(flow.delta) + 1):
        return "Buy/sell balanced → no side in control yet."
    return "Flow slightly skewed → needs confirmation from price and volume."


def range_conclusion(state: RangeState) -> str:
    if state is RangeState.NARROW:
        return "1D range contracting → volatility compression; wait for a breakout with volume."
    if state is RangeState.WIDE:
        return "1D range expanding → strong swings and stop hunts; keep stop-loss discipline."
    return "1D range average → watch the reaction at key levels."


def fee_conclusion(fastest_fee: Optional[float]) -> str:
    if fastest_fee is None or not math.isfinite(fastest_fee):
        return "No fee data to conclude from."
    if fastest_fee < LOW_FEE:
        return "Low network fees → quiet network, no urgent on-chain flow; fits a sideways market."
    if fastest_fee <= MODERATE_FEE:
        return "Moderate network fees → no panic or FOMO pressure; market leans to wait-and-see."
    if fastest_fee <= ELEVATED_FEE:
        return "Elevated network fees → on-chain demand rising; watch price and volume closely."
    return "Very high network fees → congested network, usually with panic or FOMO; high volatility risk."


def liquidity_shift(btc_pct_h4: Optional[float], gold_pct_h4: Optional[float]) -> LiquidityShift:
    btc_flat = btc_pct_h4 is not None and abs(btc_pct_h4) < BTC_FLAT_PCT
    gold_strong = gold_pct_h4 is not None and gold_pct_h4 > GOLD_STRONG_PCT

    if btc_flat and gold_strong:
        return LiquidityShift(
            shift=True,
            text="BTC flat while gold rallies → short-term liquidity tilting towards precious metals.",
        )
    if gold_strong:
        return LiquidityShift(
            shift=True,
            text="Gold running hard → flows favour the market with the better range.",
        )
    return LiquidityShift(shift=False, text="No clear sign of liquidity moving into gold.")
