"""Market-structure analysis: scoring, regime classification and reports."""

from marketpulse.analysis.pipeline import run_analysis
from marketpulse.analysis.regime import detect_market_state
from marketpulse.analysis.report import compose_report, daily_trend
from marketpulse.analysis.scoring import momentum_label, score_price_action

__all__ = [
    "compose_report",
    "daily_trend",
    "detect_market_state",
    "momentum_label",
    "run_analysis",
    "score_price_action",
]
