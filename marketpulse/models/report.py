"""Analysis result data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Trend(str, Enum):
    """Daily trend relative to EMA50."""

    UP = "Uptrend"
    DOWN = "Downtrend"
    SIDEWAYS = "Sideways"


class HigherTimeframeTrend(str, Enum):
    """4-hour trend confirmation relative to EMA50(H4)."""

    UP = "up"
    DOWN = "down"
    SIDE = "side"


class Momentum(str, Enum):
    """Momentum label derived from RSI14."""

    BULLISH = "Bullish momentum"
    BEARISH = "Bearish momentum"
    NEUTRAL = "Neutral"


class MarketState(str, Enum):
    """Discrete market regime label."""

    BREAKOUT = "BREAKOUT"
    BREAKDOWN = "BREAKDOWN"
    ACCUMULATION = "ACCUMULATION"
    DISTRIBUTION = "DISTRIBUTION"
    NEUTRAL = "NEUTRAL"


class RegimeResult(BaseModel):
    """Market state with the rationale of the rule that matched."""

    state: MarketState = Field(..., description="Classified regime")
    rationale: str = Field(..., min_length=1, description="Why the rule matched")

    model_config = {"frozen": True}


class IndicatorSnapshot(BaseModel):
    """Last indicator values for one candle series."""

    close: float = Field(..., description="Last close")
    ema20: float = Field(..., description="EMA(20) of closes")
    ema20_prev: float = Field(..., description="EMA(20) five bars back")
    ema50: float = Field(..., description="EMA(50) of closes")
    rsi14: float = Field(..., ge=0, le=100, description="Wilder RSI(14)")
    atr14: float = Field(..., ge=0, description="Wilder ATR(14)")

    model_config = {"frozen": True}


class SupportResistanceBands(BaseModel):
    """Two resistance and two support levels, nearest band first."""

    resistance: tuple[float, float] = Field(..., description="Ascending")
    support: tuple[float, float] = Field(..., description="Descending")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "SupportResistanceBands":
        if self.resistance[0] > self.resistance[1]:
            raise ValueError("resistance levels must be ascending")
        if self.support[0] < self.support[1]:
            raise ValueError("support levels must be descending")
        return self

    @property
    def nearest_support(self) -> float:
        return self.support[0]

    @property
    def nearest_resistance(self) -> float:
        return self.resistance[0]


class Report(BaseModel):
    """Technical-analysis report for one symbol, built once per run."""

    symbol: str = Field(..., min_length=1, description="Trading symbol")
    as_of: datetime = Field(..., description="Wall-clock time of the analysis")
    trend: Trend = Field(..., description="Daily trend")
    h4_trend: HigherTimeframeTrend = Field(..., description="4-hour confirmation")
    momentum: Momentum = Field(..., description="Momentum label")
    score: float = Field(..., ge=0, le=10, description="Price-action score")
    state: RegimeResult = Field(..., description="Market regime")
    bands: SupportResistanceBands = Field(..., description="Key price levels")
    volatility: float = Field(..., ge=0, description="Daily ATR(14)")
    daily: IndicatorSnapshot = Field(..., description="Daily indicators")
    h4: IndicatorSnapshot = Field(..., description="4-hour indicators")

    model_config = {"frozen": True}
