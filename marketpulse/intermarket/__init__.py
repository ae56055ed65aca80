"""Intermarket flow report (BTC vs. gold proxy)."""

from marketpulse.intermarket.fees import MempoolFees, fetch_mempool_fees
from marketpulse.intermarket.flow import (
    BuySellFlow,
    DailyRange,
    H4Summary,
    LiquidityShift,
    RangeState,
    buy_sell_flow,
    daily_range,
    fee_conclusion,
    flow_conclusion,
    liquidity_shift,
    range_conclusion,
    summarize_h4,
)
from marketpulse.intermarket.job import (
    IntermarketJobResult,
    IntermarketSnapshot,
    collect_snapshot,
    render_intermarket,
    run_intermarket_job,
)

__all__ = [
    "BuySellFlow",
    "DailyRange",
    "H4Summary",
    "IntermarketJobResult",
    "IntermarketSnapshot",
    "LiquidityShift",
    "MempoolFees",
    "RangeState",
    "buy_sell_flow",
    "collect_snapshot",
    "daily_range",
    "fee_conclusion",
    "fetch_mempool_fees",
    "flow_conclusion",
    "liquidity_shift",
    "range_conclusion",
    "render_intermarket",
    "run_intermarket_job",
    "summarize_h4",
]
