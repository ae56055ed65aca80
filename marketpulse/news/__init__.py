"""Crypto news digest pipeline."""

from marketpulse.news.digest import build_digest, fit_digest
from marketpulse.news.feeds import fetch_all, parse_feed
from marketpulse.news.job import NewsJobResult, run_news_job
from marketpulse.news.relevance import is_relevant, pick_candidates
from marketpulse.news.translate import translate_text

__all__ = [
    "NewsJobResult",
    "build_digest",
    "fetch_all",
    "fit_digest",
    "is_relevant",
    "parse_feed",
    "pick_candidates",
    "run_news_job",
    "translate_text",
]
