"""Report composition."""

from datetime import datetime

from marketpulse.analysis.scoring import momentum_label
from marketpulse.models import (
    HigherTimeframeTrend,
    IndicatorSnapshot,
    RegimeResult,
    Report,
    SupportResistanceBands,
    Trend,
)


def daily_trend(snapshot: IndicatorSnapshot) -> Trend:
    """Daily trend from the close relative to EMA50."""
    if snapshot.close > snapshot.ema50:
        return Trend.UP
    if snapshot.close < snapshot.ema50:
        return Trend.DOWN
    return Trend.SIDEWAYS


def compose_report(
    symbol: str,
    as_of: datetime,
    daily: IndicatorSnapshot,
    h4: IndicatorSnapshot,
    h4_trend: HigherTimeframeTrend,
    bands: SupportResistanceBands,
    score: float,
    state: RegimeResult,
) -> Report:
    """Assemble an immutable Report from analysis outputs.

    Pure aggregation: derives the trend and momentum labels from the daily
    snapshot and performs no I/O.
    """
    return Report(
        symbol=symbol,
        as_of=as_of,
        trend=daily_trend(daily),
        h4_trend=h4_trend,
        momentum=momentum_label(daily.rsi14),
        score=score,
        state=state,
        bands=bands,
        volatility=daily.atr14,
        daily=daily,
        h4=h4,
    )
