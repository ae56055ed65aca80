"""Render an analysis Report as a Telegram HTML message."""

from marketpulse.models import HigherTimeframeTrend, Report
from marketpulse.render.format import escape, fmt_price

DISCLAIMER = "For reference only, not investment advice."

H4_LABELS = {
    HigherTimeframeTrend.UP: "aligned bullish",
    HigherTimeframeTrend.DOWN: "aligned bearish",
    HigherTimeframeTrend.SIDE: "ranging",
}


def render_report(report: Report) -> str:
    """Render the report in the daily TA post layout.

    Prices are whole numbers, RSI is rounded and the score keeps one decimal.
    """
    date_str = report.as_of.strftime("%d/%m/%Y")
    daily = report.daily
    h4 = report.h4
    bands = report.bands
    near_support = fmt_price(bands.nearest_support)

    lines = [
        f"❇️ <b>{escape(report.symbol)} – TECHNICAL ANALYSIS 1D &amp; H4</b> | {date_str}",
        "",
        "❇️ <b>Market structure</b>",
        "🔹 Trend (1D)",
        f"👉 {report.trend.value} | Price: {fmt_price(daily.close)} | "
        f"EMA20: {fmt_price(daily.ema20)} | EMA50: {fmt_price(daily.ema50)}",
        "",
        "🔹 Confirmation (H4)",
        f"👉 H4 {H4_LABELS[report.h4_trend]} | H4 Close: {fmt_price(h4.close)} | "
        f"EMA50(H4): {fmt_price(h4.ema50)}",
        "",
        "🔹 Momentum",
        f"👉 RSI(14) ~ {fmt_price(daily.rsi14)} → {report.momentum.value}",
        "",
        "🔹 Price action score",
        f"👉 {report.score:.1f}/10",
        "",
        "🔹 Market state",
        f"👉 {report.state.state.value} – {escape(report.state.rationale)}",
        "",
        "❇️ <b>Key price zones</b>",
        "🔹 Resistance (2 tiers)",
        f"👉 {fmt_price(bands.resistance[0])}",
        f"👉 {fmt_price(bands.resistance[1])}",
        "",
        "🔹 Support (2 tiers)",
        f"👉 {fmt_price(bands.support[0])}",
        f"👉 {fmt_price(bands.support[1])}",
        "",
        "❇️ <b>Expected volatility</b>",
        "🔹 ATR(14)",
        f"👉 ~ {fmt_price(report.volatility)} points/day (estimate)",
        "",
        "📊 <b>REFERENCE SCENARIOS</b>",
        "🔵 LONG – from the demand zone",
        "🔹 Condition",
        f"👉 Hold {near_support} with a confirming candle",
        "",
        "🔴 SHORT – on a support break",
        "🔹 Condition",
        f"👉 Lose {near_support} and fail the retest",
        "",
        f"🔹 Note: {DISCLAIMER}",
    ]
    return "\n".join(lines)
