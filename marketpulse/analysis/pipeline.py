"""End-to-end analysis pipeline.

Indicators -> score -> regime -> report, run to completion over fully
materialized series. Any error aborts the run; no partial report exists.
"""

from datetime import datetime
from typing import Optional

import pytz

from marketpulse.analysis.regime import detect_market_state
from marketpulse.analysis.report import compose_report
from marketpulse.analysis.scoring import score_price_action
from marketpulse.config import AnalysisConfig
from marketpulse.indicators.snapshot import (
    SNAPSHOT_MIN_CANDLES,
    SWING_LOOKBACK,
    compute_snapshot,
    higher_timeframe_trend,
)
from marketpulse.indicators.technical import calculate_swing_levels
from marketpulse.models import CandleSeries, Report

DAILY_MIN_CANDLES = max(SWING_LOOKBACK, SNAPSHOT_MIN_CANDLES)


def now_in(timezone: str) -> datetime:
    """Current wall-clock time in the given timezone."""
    return datetime.now(pytz.timezone(timezone))


def run_analysis(
    daily: CandleSeries,
    h4: CandleSeries,
    config: Optional[AnalysisConfig] = None,
    as_of: Optional[datetime] = None,
) -> Report:
    """Build a technical-analysis report from daily and 4-hour candles.

    Args:
        daily: Daily candles (at least 60), oldest first.
        h4: 4-hour candles (at least 50), oldest first.
        config: Analysis settings; used for the report timezone.
        as_of: Report timestamp (default: now in the configured timezone).

    Returns:
        Immutable Report.

    Raises:
        InsufficientDataError: If either series is too short.
    """
    config = config or AnalysisConfig()

    daily.require(DAILY_MIN_CANDLES, f"{daily.symbol} daily analysis")
    h4.require(SNAPSHOT_MIN_CANDLES, f"{h4.symbol} 4-hour confirmation")

    daily_snapshot = compute_snapshot(daily)
    h4_snapshot = compute_snapshot(h4)
    h4_trend = higher_timeframe_trend(h4_snapshot)

    bands = calculate_swing_levels(daily.candles, SWING_LOOKBACK)

    score = score_price_action(
        close=daily_snapshot.close,
        ema50=daily_snapshot.ema50,
        rsi14=daily_snapshot.rsi14,
        atr14=daily_snapshot.atr14,
        h4_trend=h4_trend,
    )

    state = detect_market_state(daily, daily_snapshot.ema50, daily_snapshot.atr14)

    return compose_report(
        symbol=daily.symbol,
        as_of=as_of or now_in(config.timezone),
        daily=daily_snapshot,
        h4=h4_snapshot,
        h4_trend=h4_trend,
        bands=bands,
        score=score,
        state=state,
    )
