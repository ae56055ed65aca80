"""News digest job: fetch, filter, translate, send, record."""

import logging
from datetime import datetime
from typing import Optional

import requests
from pydantic import BaseModel, Field

from marketpulse.config import NewsConfig
from marketpulse.db.store import DataStore
from marketpulse.delivery.telegram import TelegramChannel
from marketpulse.news.digest import fit_digest
from marketpulse.news.feeds import fetch_all
from marketpulse.news.relevance import pick_candidates
from marketpulse.news.translate import translate_text

logger = logging.getLogger(__name__)


class NewsJobResult(BaseModel):
    """Outcome of one news job run."""

    sent: bool = Field(..., description="Whether a digest was delivered")
    reason: Optional[str] = Field(default=None, description="Why nothing was sent")
    count: int = Field(default=0, ge=0, description="Items in (or available for) the digest")
    text: Optional[str] = Field(default=None, description="Rendered digest")

    model_config = {"frozen": True}


def run_news_job(
    config: NewsConfig,
    store: DataStore,
    channel: Optional[TelegramChannel],
    session: Optional[requests.Session] = None,
    timeout: float = 15.0,
    now: Optional[datetime] = None,
) -> NewsJobResult:
    """Run the news digest once.

    Items are recorded as posted only after the channel accepted the digest.
    With ``channel=None`` the digest is rendered but neither sent nor recorded.
    """
    session = session or requests.Session()

    raw = fetch_all(session, config.sources, timeout)
    candidates = pick_candidates(raw, config.keywords, store.is_posted, config.max_items)
    logger.info("News: %d raw items, %d candidates", len(raw), len(candidates))

    if not candidates:
        return NewsJobResult(sent=False, reason="no_candidates")

    picked = candidates[: config.max_items]
    if len(picked) < config.min_items:
        return NewsJobResult(sent=False, reason="not_enough_relevant", count=len(picked))

    if config.translate:
        picked = [
            item.model_copy(update={
                "title_translated": translate_text(session, item.title, config.target_language, timeout),
                "summary_translated": translate_text(session, item.summary, config.target_language, timeout),
            })
            for item in picked
        ]

    text, included = fit_digest(picked, now or datetime.now())
    if len(included) < config.min_items:
        logger.info("News: only %d items fit one message", len(included))
        return NewsJobResult(sent=False, reason="not_enough_relevant", count=len(included))

    if channel is None:
        return NewsJobResult(sent=False, reason="dry_run", count=len(included), text=text)

    channel.send(text)
    store.mark_posted(included)

    return NewsJobResult(sent=True, count=len(included), text=text)
