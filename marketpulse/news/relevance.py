"""Keyword relevance and candidate selection for the news digest."""

from typing import Callable, Iterable, Sequence

from marketpulse.models import NewsItem


def is_relevant(item: NewsItem, keywords: Sequence[str]) -> bool:
    """Case-insensitive substring match of any keyword in title or summary."""
    haystack = f"{item.title} {item.summary}".lower()
    return any(keyword.lower() in haystack for keyword in keywords)


def _published_key(item: NewsItem) -> float:
    return item.published_at.timestamp() if item.published_at else 0.0


def pick_candidates(
    items: Iterable[NewsItem],
    keywords: Sequence[str],
    is_posted: Callable[[str], bool],
    max_items: int,
) -> list[NewsItem]:
    """Select unposted, relevant items, newest first.

    Items without a link, repeated links and links whose hash is already
    posted are dropped. At most ``2 * max_items`` candidates are returned.

    Args:
        items: Raw items from all feeds.
        keywords: Relevance keywords.
        is_posted: Predicate on a URL hash, usually ``DataStore.is_posted``.
        max_items: Digest size.

    Returns:
        Candidate items sorted by publication time, newest first.
    """
    seen: set[str] = set()
    candidates = []

    for item in items:
        if not item.link or item.link in seen:
            continue
        seen.add(item.link)

        if is_posted(item.url_hash):
            continue
        if not is_relevant(item, keywords):
            continue

        candidates.append(item)

    candidates.sort(key=_published_key, reverse=True)
    return candidates[: max_items * 2]
