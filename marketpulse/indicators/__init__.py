"""Technical indicators module."""

from marketpulse.indicators.snapshot import compute_snapshot, higher_timeframe_trend
from marketpulse.indicators.technical import (
    calculate_atr,
    calculate_ema,
    calculate_rsi,
    calculate_swing_levels,
    last_value,
    true_ranges,
)

__all__ = [
    "calculate_atr",
    "calculate_ema",
    "calculate_rsi",
    "calculate_swing_levels",
    "compute_snapshot",
    "higher_timeframe_trend",
    "last_value",
    "true_ranges",
]
