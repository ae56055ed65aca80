"""News digest rendering."""

from datetime import datetime
from typing import Sequence

from marketpulse.delivery.telegram import MAX_MESSAGE_LENGTH
from marketpulse.models import NewsItem
from marketpulse.render.format import escape, safe_text

DISCLAIMER = "🔹 Note: news is for reference only, not investment advice."


def _item_block(index: int, item: NewsItem) -> str:
    title = item.title_translated or item.title
    summary = item.summary_translated or item.summary
    lines = [
        f"🔹 {index}) <b>{escape(safe_text(title, 140))}</b>",
        f"🔹 Source: {escape(item.source)}",
    ]
    if summary:
        lines.append(f"🔹 Summary: {escape(safe_text(summary, 260))}")
    lines.append(f"🔹 Link: {escape(item.link)}")
    return "\n".join(lines)


def build_digest(items: Sequence[NewsItem], date: datetime) -> str:
    """Render the crypto news digest post."""
    parts = [f"❇️ <b>CRYPTO NEWS DIGEST</b> | {date.strftime('%d/%m/%Y')}"]
    for i, item in enumerate(items, start=1):
        parts.append(_item_block(i, item))
    parts.append(DISCLAIMER)
    return "\n\n".join(parts)


def fit_digest(
    items: Sequence[NewsItem],
    date: datetime,
    max_length: int = MAX_MESSAGE_LENGTH,
) -> tuple[str, list[NewsItem]]:
    """Render the largest leading slice of items that fits one message.

    Returns:
        Tuple of (digest text, items included in it).
    """
    included = list(items)
    text = build_digest(included, date)
    while len(text) > max_length and len(included) > 1:
        included.pop()
        text = build_digest(included, date)
    return text, included
