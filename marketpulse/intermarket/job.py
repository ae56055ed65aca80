"""Intermarket flow job: BTC versus a gold proxy, taker flow, range and fees."""

import logging
from datetime import datetime
from typing import Optional

import requests
from pydantic import BaseModel, Field

from marketpulse.config import IntermarketConfig
from marketpulse.delivery.telegram import TelegramChannel
from marketpulse.errors import InsufficientDataError, UpstreamFetchError
from marketpulse.intermarket.fees import MempoolFees, fetch_mempool_fees
from marketpulse.intermarket.flow import (
    BTC_FLAT_PCT,
    BuySellFlow,
    DailyRange,
    H4Summary,
    buy_sell_flow,
    daily_range,
    fee_conclusion,
    flow_conclusion,
    liquidity_shift,
    range_conclusion,
    summarize_h4,
)
from marketpulse.providers.binance import BinanceProvider
from marketpulse.render.format import NA, escape, fmt_money, fmt_pct, fmt_price

logger = logging.getLogger(__name__)

H4_WINDOW_LIMIT = 4
DAILY_WINDOW_LIMIT = 3

DISCLAIMER = "For reference only, not investment advice."
BIG_MONEY_VIEW = (
    "When BTC moves sideways while gold runs hard, large positions usually favour "
    "the narrative with the better range, so BTC may be passed over for a while."
)


class IntermarketSnapshot(BaseModel):
    """Everything the intermarket post is rendered from."""

    btc: H4Summary
    flow: BuySellFlow
    gold: H4Summary
    silver: Optional[H4Summary] = None
    range_1d: DailyRange
    fees: MempoolFees = Field(default_factory=MempoolFees)
    open_interest: Optional[float] = None
    funding_rate: Optional[float] = None

    model_config = {"frozen": True}


class IntermarketJobResult(BaseModel):
    sent: bool
    text: str

    model_config = {"frozen": True}


def _fee(value: Optional[float]) -> str:
    return NA if value is None else f"{value:g}"


def render_intermarket(
    snapshot: IntermarketSnapshot,
    config: IntermarketConfig,
    now: datetime,
) -> str:
    """Render the intermarket flow post in Telegram HTML."""
    btc = snapshot.btc
    flow = snapshot.flow
    gold = snapshot.gold
    rng = snapshot.range_1d
    fees = snapshot.fees
    shift = liquidity_shift(btc.pct_h4, gold.pct_h4)

    buy_pct = f"{flow.buy_pct:.1f}%" if flow.buy_pct is not None else NA
    range_pct = f"{rng.range_pct:.2f}%" if rng.range_pct is not None else NA

    flow_lines = [
        f"🔹 Buy: <b>{fmt_money(flow.buy_quote)}</b> | Sell: <b>{fmt_money(flow.sell_quote)}</b>",
        f"🔹 Delta: <b>{fmt_money(flow.delta)}</b> | Buy%: <b>{buy_pct}</b>",
    ]
    if snapshot.open_interest is not None:
        flow_lines.append(f"🔹 Futures OI: <b>{fmt_money(snapshot.open_interest)}</b>")
    if snapshot.funding_rate is not None:
        flow_lines.append(f"🔹 Funding: <b>{fmt_pct(snapshot.funding_rate)}</b>")

    gold_lines = [
        f"🔹 H4 change: <b>{fmt_pct(gold.pct_h4)}</b>",
        f"🔹 H4 volume (USDT): <b>{fmt_money(gold.quote_volume_h4)}</b>",
    ]
    if snapshot.silver is not None:
        gold_lines.append(f"🔹 Silver (proxy) H4: <b>{fmt_pct(snapshot.silver.pct_h4)}</b>")

    if btc.pct_h4 is not None and abs(btc.pct_h4) < BTC_FLAT_PCT:
        btc_summary = "Sideways, waiting for liquidity; observe first."
    else:
        btc_summary = "Moving on H4; wait for confirmation."
    if shift.shift:
        gold_summary = "Drawing short-term attention; size small and manage risk."
    else:
        gold_summary = "Not clearly drawing liquidity; wait."

    lines = [
        "📊 <b>INTERMARKET FLOW | BTC – GOLD</b>",
        f"<i>{now.strftime('%d/%m/%Y %H:%M')} | Frames: H4 (flow) · 1D (range)</i>",
        "",
        "❇️ <b>BTC – Key figures</b>",
        f"🔹 Price: <b>{fmt_price(btc.close_now)}</b>",
        f"🔹 H4 change: <b>{fmt_pct(btc.pct_h4)}</b>",
        f"🔹 H4 volume (USDT): <b>{fmt_money(btc.quote_volume_h4)}</b>",
        "",
        "🔹 <b>H4 taker flow (USDT)</b>",
        *flow_lines,
        f"👉 View: {flow_conclusion(flow)}",
        "",
        f"❇️ <b>Gold (proxy: {escape(config.gold_symbol)})</b>",
        *gold_lines,
        f"👉 View: {shift.text}",
        "",
        "🟡 <b>Big-money view</b>",
        f"🔹 {BIG_MONEY_VIEW}",
        "",
        "❇️ <b>BTC range (1D)</b>",
        f"🔹 High/Low: <b>{fmt_price(rng.high)}</b> / <b>{fmt_price(rng.low)}</b>",
        f"🔹 1D range: <b>{range_pct}</b> | State: <b>{rng.state.value}</b>",
        f"👉 View: {range_conclusion(rng.state)}",
        "",
        "❇️ <b>Network fee (mempool)</b>",
        f"🔹 Fastest: <b>{_fee(fees.fastest)}</b> sat/vB",
        f"🔹 ~30m: <b>{_fee(fees.half_hour)}</b> sat/vB",
        f"🔹 ~60m: <b>{_fee(fees.hour)}</b> sat/vB",
        f"👉 Conclusion: {fee_conclusion(fees.fastest)}",
        "",
        "❇️ <b>Summary</b>",
        f"🔹 BTC: {btc_summary}",
        f"🔹 Gold: {gold_summary}",
        "",
        f"⚠️ <i>{DISCLAIMER}</i>",
    ]
    return "\n".join(lines)


def collect_snapshot(
    config: IntermarketConfig,
    provider: BinanceProvider,
    session: requests.Session,
    timeout: float = 15.0,
) -> IntermarketSnapshot:
    """Fetch and compute all intermarket metrics.

    BTC and gold data are required. Silver, futures OI/funding and mempool
    fees are optional: failures are logged and the value is omitted.

    Raises:
        UpstreamFetchError: If BTC or gold klines cannot be fetched.
    """
    btc_hourly = provider.get_klines(config.btc_symbol, "1h", H4_WINDOW_LIMIT)
    btc_daily = provider.get_klines(config.btc_symbol, "1d", DAILY_WINDOW_LIMIT)
    gold_hourly = provider.get_klines(config.gold_symbol, "1h", H4_WINDOW_LIMIT)

    silver = None
    if config.silver_symbol:
        try:
            silver = summarize_h4(provider.get_klines(config.silver_symbol, "1h", H4_WINDOW_LIMIT))
        except (UpstreamFetchError, InsufficientDataError) as e:
            logger.warning("Silver proxy %s unavailable: %s", config.silver_symbol, e)

    open_interest = None
    try:
        open_interest = provider.get_open_interest(config.btc_symbol)
    except UpstreamFetchError as e:
        logger.warning("Futures open interest unavailable: %s", e)

    funding_rate = None
    try:
        funding_rate = provider.get_funding_rate(config.btc_symbol)
    except UpstreamFetchError as e:
        logger.warning("Futures funding rate unavailable: %s", e)

    return IntermarketSnapshot(
        btc=summarize_h4(btc_hourly),
        flow=buy_sell_flow(btc_hourly),
        gold=summarize_h4(gold_hourly),
        silver=silver,
        range_1d=daily_range(btc_daily),
        fees=fetch_mempool_fees(session, timeout),
        open_interest=open_interest,
        funding_rate=funding_rate,
    )


def run_intermarket_job(
    config: IntermarketConfig,
    provider: BinanceProvider,
    channel: Optional[TelegramChannel],
    session: Optional[requests.Session] = None,
    timeout: float = 15.0,
    now: Optional[datetime] = None,
) -> IntermarketJobResult:
    """Run the intermarket job once; ``channel=None`` renders without sending."""
    session = session or requests.Session()
    snapshot = collect_snapshot(config, provider, session, timeout)
    text = render_intermarket(snapshot, config, now or datetime.now())

    if channel is None:
        return IntermarketJobResult(sent=False, text=text)

    channel.send(text)
    logger.info("Intermarket post delivered for %s", config.btc_symbol)
    return IntermarketJobResult(sent=True, text=text)
