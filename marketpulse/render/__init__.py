"""Message rendering for the delivery channel."""

from marketpulse.render.format import escape, fmt_money, fmt_pct, fmt_price, safe_text
from marketpulse.render.report import render_report

__all__ = [
    "escape",
    "fmt_money",
    "fmt_pct",
    "fmt_price",
    "render_report",
    "safe_text",
]
