"""News item data model."""

import hashlib
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


def hash_url(url: str) -> str:
    """Content address of a news link (SHA-1 hex digest)."""
    return hashlib.sha1(url.encode("utf-8")).hexdigest()


class NewsItem(BaseModel):
    """A headline pulled from an RSS source."""

    title: str = Field(default="", description="Headline")
    link: str = Field(default="", description="Article URL")
    summary: str = Field(default="", description="Plain-text snippet")
    source: str = Field(..., description="Feed name")
    published_at: Optional[datetime] = Field(default=None, description="Publication time")
    title_translated: Optional[str] = Field(default=None, description="Translated headline")
    summary_translated: Optional[str] = Field(default=None, description="Translated snippet")

    model_config = {"frozen": True}

    @property
    def url_hash(self) -> str:
        return hash_url(self.link)
