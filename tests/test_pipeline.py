"""Tests for the end-to-end analysis pipeline."""

from datetime import datetime

import pytest

from marketpulse.analysis import run_analysis
from marketpulse.config import AnalysisConfig
from marketpulse.errors import InsufficientDataError
from marketpulse.models import (
    HigherTimeframeTrend,
    MarketState,
    Momentum,
    Report,
    Trend,
)


class TestPipelineOutput:

    def test_breakout_fixture_report(self, breakout_daily, rising_h4):
        report = run_analysis(breakout_daily, rising_h4, as_of=datetime(2024, 3, 1))

        assert isinstance(report, Report)
        assert report.symbol == "BTCUSDT"
        assert report.trend is Trend.UP
        assert report.h4_trend is HigherTimeframeTrend.UP
        assert report.momentum is Momentum.BULLISH
        assert report.state.state is MarketState.BREAKOUT
        # +2 trend, +1.5 momentum, +0.5 low volatility, +1 H4
        assert report.score == pytest.approx(10.0)
        assert report.volatility == pytest.approx(1.5)
        assert report.bands.resistance == pytest.approx((160.0, 160.0))
        assert report.bands.support == pytest.approx((129.25, 98.5))

    def test_default_timestamp_uses_configured_timezone(self, breakout_daily, rising_h4):
        config = AnalysisConfig(timezone="Europe/London")
        report = run_analysis(breakout_daily, rising_h4, config)

        assert report.as_of.tzinfo is not None
        assert report.as_of.tzinfo.zone == "Europe/London"


class TestDeterminism:
    """
    **Feature: market-pulse, Property 8: Pipeline Determinism**

    *For any* fixed input, two runs produce identical reports apart from
    the wall-clock timestamp.
    """

    def test_two_runs_match_except_timestamp(self, breakout_daily, rising_h4):
        first = run_analysis(breakout_daily, rising_h4)
        second = run_analysis(breakout_daily, rising_h4)

        assert first.model_dump(exclude={"as_of"}) == second.model_dump(exclude={"as_of"})


class TestInsufficientData:

    def test_short_daily_series(self, rising_h4, rising_series):
        daily = rising_series(59)
        with pytest.raises(InsufficientDataError) as exc_info:
            run_analysis(daily, rising_h4)
        assert exc_info.value.required == 60

    def test_short_h4_series(self, breakout_daily, rising_series):
        h4 = rising_series(49, interval="4h")
        with pytest.raises(InsufficientDataError) as exc_info:
            run_analysis(breakout_daily, h4)
        assert exc_info.value.required == 50
