"""Data models for MarketPulse."""

from marketpulse.models.candle import Candle, CandleSeries
from marketpulse.models.news import NewsItem
from marketpulse.models.report import (
    HigherTimeframeTrend,
    IndicatorSnapshot,
    MarketState,
    Momentum,
    RegimeResult,
    Report,
    SupportResistanceBands,
    Trend,
)

__all__ = [
    "Candle",
    "CandleSeries",
    "HigherTimeframeTrend",
    "IndicatorSnapshot",
    "MarketState",
    "Momentum",
    "NewsItem",
    "RegimeResult",
    "Report",
    "SupportResistanceBands",
    "Trend",
]
