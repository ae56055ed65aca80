"""Number and text formatting for outgoing messages."""

import html
import math
import re
from typing import Optional

NA = "n/a"


def _is_number(value: Optional[float]) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def fmt_price(value: Optional[float]) -> str:
    """Whole-number price with thousands separators."""
    if not _is_number(value):
        return NA
    # Halves round up
    return f"{math.floor(value + 0.5):,}"


def fmt_pct(value: Optional[float]) -> str:
    """Signed percentage with two decimals, e.g. ``+1.25%``."""
    if not _is_number(value):
        return NA
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def fmt_money(value: Optional[float]) -> str:
    """Compact amount with K/M/B suffixes."""
    if not _is_number(value):
        return NA
    sign = "" if value >= 0 else "-"
    amount = abs(value)
    if amount >= 1e9:
        return f"{sign}{amount / 1e9:.2f}B"
    if amount >= 1e6:
        return f"{sign}{amount / 1e6:.2f}M"
    if amount >= 1e3:
        return f"{sign}{amount / 1e3:.2f}K"
    return f"{sign}{amount:.0f}"


def safe_text(text: Optional[str], max_length: int = 280) -> str:
    """Collapse whitespace and truncate with an ellipsis."""
    if not text:
        return ""
    cleaned = re.sub(r"\s+", " ", str(text)).strip()
    if len(cleaned) > max_length:
        return cleaned[: max_length - 1] + "…"
    return cleaned


def escape(text: str) -> str:
    """Escape text for Telegram's HTML parse mode."""
    return html.escape(text, quote=False)
