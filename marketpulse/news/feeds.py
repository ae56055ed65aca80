"""RSS and Atom feed fetching."""

import html
import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional

import requests

from marketpulse.config import FeedSource
from marketpulse.models import NewsItem
from marketpulse.render.format import safe_text

logger = logging.getLogger(__name__)

ATOM_NS = "{http://www.w3.org/2005/Atom}"
CONTENT_NS = "{http://purl.org/rss/1.0/modules/content/}"
TAG_RE = re.compile(r"<[^>]+>")


def _text(element: Optional[ET.Element]) -> str:
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def _strip_html(text: str) -> str:
    return html.unescape(TAG_RE.sub(" ", text))


def parse_date(value: str) -> Optional[datetime]:
    """Parse an RFC 822 (RSS) or ISO 8601 (Atom) date, or return None."""
    value = value.strip()
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_feed(content: bytes, source: str) -> list[NewsItem]:
    """Parse RSS 2.0 or Atom XML into news items.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not XML.
    """
    root = ET.fromstring(content)
    items = []

    for entry in root.iter("item"):
        summary = _text(entry.find("description")) or _text(entry.find(f"{CONTENT_NS}encoded"))
        items.append(NewsItem(
            title=_text(entry.find("title")),
            link=_text(entry.find("link")),
            summary=safe_text(_strip_html(summary), 800),
            source=source,
            published_at=parse_date(_text(entry.find("pubDate"))),
        ))

    for entry in root.iter(f"{ATOM_NS}entry"):
        link_el = entry.find(f"{ATOM_NS}link")
        summary = _text(entry.find(f"{ATOM_NS}summary")) or _text(entry.find(f"{ATOM_NS}content"))
        published = _text(entry.find(f"{ATOM_NS}published")) or _text(entry.find(f"{ATOM_NS}updated"))
        items.append(NewsItem(
            title=_text(entry.find(f"{ATOM_NS}title")),
            link=link_el.get("href", "") if link_el is not None else "",
            summary=safe_text(_strip_html(summary), 800),
            source=source,
            published_at=parse_date(published),
        ))

    return items


def fetch_feed(session: requests.Session, source: FeedSource, timeout: float = 15.0) -> list[NewsItem]:
    """Fetch and parse one feed."""
    response = session.get(source.url, timeout=timeout)
    response.raise_for_status()
    return parse_feed(response.content, source.name)


def fetch_all(
    session: requests.Session,
    sources: list[FeedSource],
    timeout: float = 15.0,
) -> list[NewsItem]:
    """Fetch every source, skipping the ones that fail."""
    items: list[NewsItem] = []
    for source in sources:
        try:
            items.extend(fetch_feed(session, source, timeout))
        except (requests.RequestException, ET.ParseError) as e:
            logger.warning("Skipping feed %s: %s", source.name, e)
    return items
