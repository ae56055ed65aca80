"""Tests for the news digest pipeline."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
from hypothesis import given, settings
from hypothesis import strategies as st

from marketpulse.config import FeedSource, NewsConfig
from marketpulse.db.store import DataStore
from marketpulse.errors import DeliveryError
from marketpulse.models import NewsItem
from marketpulse.news import (
    build_digest,
    fetch_all,
    fit_digest,
    is_relevant,
    parse_feed,
    pick_candidates,
    run_news_job,
    translate_text,
)
from marketpulse.news.feeds import parse_date

KEYWORDS = ["bitcoin", "btc", "ethereum", "etf"]

ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <entry>
    <title>Ethereum upgrade lands</title>
    <link href="https://example.com/eth-upgrade"/>
    <summary>Layer 2 fees drop after the upgrade.</summary>
    <updated>2024-01-02T08:00:00Z</updated>
  </entry>
</feed>
"""


def rss_feed(titles: list[str], start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)) -> bytes:
    """RSS 2.0 document with one item per title, one hour apart."""
    items = []
    for i, title in enumerate(titles):
        published = (start + timedelta(hours=i)).strftime("%a, %d %b %Y %H:%M:%S +0000")
        items.append(
            f"<item><title>{title}</title>"
            f"<link>https://example.com/{i}</link>"
            f"<description><![CDATA[<p>Story about <b>{title}</b> &amp; markets</p>]]></description>"
            f"<pubDate>{published}</pubDate></item>"
        )
    return (
        '<?xml version="1.0"?><rss version="2.0"><channel><title>Example</title>'
        + "".join(items)
        + "</channel></rss>"
    ).encode()


def feed_session(content: bytes) -> MagicMock:
    session = MagicMock()
    session.get.return_value.content = content
    return session


def make_item(n: int, title: str = "Bitcoin moves", link: str | None = None) -> NewsItem:
    return NewsItem(
        title=title,
        link=link or f"https://example.com/{n}",
        summary="",
        source="Example",
        published_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(hours=n),
    )


class TestFeedParsing:

    def test_parse_rss(self):
        items = parse_feed(rss_feed(["Bitcoin ETF inflows"]), "Example")

        assert len(items) == 1
        item = items[0]
        assert item.title == "Bitcoin ETF inflows"
        assert item.link == "https://example.com/0"
        assert item.summary == "Story about Bitcoin ETF inflows & markets"
        assert item.source == "Example"
        assert item.published_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_parse_atom(self):
        items = parse_feed(ATOM_FEED, "Atom")

        assert len(items) == 1
        assert items[0].title == "Ethereum upgrade lands"
        assert items[0].link == "https://example.com/eth-upgrade"
        assert items[0].published_at == datetime(2024, 1, 2, 8, tzinfo=timezone.utc)

    def test_parse_date_formats(self):
        assert parse_date("Mon, 01 Jan 2024 10:00:00 GMT").hour == 10
        assert parse_date("2024-01-01T10:00:00+00:00").hour == 10
        assert parse_date("yesterday") is None
        assert parse_date("") is None

    def test_failing_source_is_skipped(self):
        good = MagicMock()
        good.content = rss_feed(["Bitcoin news"])

        def get(url, timeout):
            if "broken" in url:
                raise requests.ConnectionError("down")
            if "garbage" in url:
                bad = MagicMock()
                bad.content = b"<html><body>not a feed"
                return bad
            return good

        session = MagicMock()
        session.get.side_effect = get
        sources = [
            FeedSource(name="Broken", url="https://broken.example.com/rss"),
            FeedSource(name="Garbage", url="https://garbage.example.com/rss"),
            FeedSource(name="Good", url="https://good.example.com/rss"),
        ]

        items = fetch_all(session, sources, timeout=3)

        assert [item.source for item in items] == ["Good"]


class TestRelevance:

    @pytest.mark.parametrize("title,expected", [
        ("BITCOIN hits new high", True),
        ("Spot ETF approved", True),
        ("Celebrity gossip", False),
    ])
    def test_keyword_match_is_case_insensitive(self, title, expected):
        assert is_relevant(NewsItem(title=title, source="x"), KEYWORDS) is expected

    def test_summary_is_searched(self):
        item = NewsItem(title="Markets today", summary="Ethereum leads", source="x")
        assert is_relevant(item, KEYWORDS)


class TestCandidateSelection:
    """
    **Feature: market-pulse, Property 11: News Candidate Selection**

    *For any* feed contents, candidates are unique, unposted, relevant and
    sorted newest first.
    """

    @given(
        hours=st.lists(st.integers(min_value=0, max_value=100), min_size=0, max_size=40),
        posted=st.sets(st.integers(min_value=0, max_value=100)),
        max_items=st.integers(min_value=1, max_value=10),
    )
    @settings(max_examples=100)
    def test_candidates_invariants(self, hours, posted, max_items):
        items = [make_item(h) for h in hours]
        posted_hashes = {make_item(h).url_hash for h in posted}

        candidates = pick_candidates(items, KEYWORDS, posted_hashes.__contains__, max_items)

        links = [c.link for c in candidates]
        assert len(links) == len(set(links))
        assert len(candidates) <= 2 * max_items
        assert all(c.url_hash not in posted_hashes for c in candidates)
        times = [c.published_at for c in candidates]
        assert times == sorted(times, reverse=True)

    def test_irrelevant_and_linkless_items_dropped(self):
        items = [
            make_item(1, title="Weather report"),
            NewsItem(title="Bitcoin without link", source="x"),
            make_item(2),
        ]
        candidates = pick_candidates(items, KEYWORDS, lambda h: False, 10)
        assert [c.link for c in candidates] == ["https://example.com/2"]


class TestDigest:

    def test_build_digest(self):
        items = [make_item(1, title="Bitcoin <rally>"), make_item(2)]
        text = build_digest(items, datetime(2024, 5, 6))

        assert text.startswith("❇️ <b>CRYPTO NEWS DIGEST</b> | 06/05/2024")
        assert "🔹 1) <b>Bitcoin &lt;rally&gt;</b>" in text
        assert "🔹 2) <b>Bitcoin moves</b>" in text
        assert "not investment advice" in text

    def test_translated_text_preferred(self):
        item = make_item(1).model_copy(update={"title_translated": "Bitcoin tăng"})
        assert "Bitcoin tăng" in build_digest([item], datetime(2024, 5, 6))

    def test_fit_digest_drops_trailing_items(self):
        items = [
            make_item(i).model_copy(update={"summary": "word " * 60})
            for i in range(10)
        ]
        text, included = fit_digest(items, datetime(2024, 5, 6), max_length=1500)

        assert len(text) <= 1500
        assert 0 < len(included) < 10
        assert included == items[: len(included)]


class TestTranslate:

    def test_translation_joined(self):
        session = MagicMock()
        session.get.return_value.json.return_value = [[["Xin chào ", "Hello "], ["thế giới", "world"]]]

        assert translate_text(session, "Hello world", "vi") == "Xin chào thế giới"
        assert session.get.call_args.kwargs["params"]["tl"] == "vi"

    def test_failure_falls_back_to_source(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")

        assert translate_text(session, "  Hello   world ") == "Hello world"

    def test_empty_text_skips_request(self):
        session = MagicMock()
        assert translate_text(session, "   ") == ""
        session.get.assert_not_called()


class TestNewsJob:
    """
    **Feature: market-pulse, Property 12: Record After Delivery**

    Items are recorded as posted only after the channel accepted the digest.
    """

    @pytest.fixture
    def store(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yield DataStore(Path(tmpdir) / "news.db")

    @pytest.fixture
    def config(self, tmp_path):
        return NewsConfig(
            max_items=3,
            min_items=2,
            translate=False,
            keywords=KEYWORDS,
            sources=[FeedSource(name="Example", url="https://example.com/rss")],
            db_path=tmp_path / "unused.db",
        )

    def feed(self) -> bytes:
        return rss_feed([
            "Bitcoin one", "Weather", "Bitcoin two", "ETF three", "Bitcoin four",
        ])

    def test_sends_newest_items_and_records_them(self, config, store):
        channel = MagicMock()
        result = run_news_job(config, store, channel, session=feed_session(self.feed()),
                              now=datetime(2024, 1, 2))

        assert result.sent is True
        assert result.count == 3
        channel.send.assert_called_once_with(result.text)
        assert store.count_posted() == 3
        # Newest first: items 4, 3, 2 of the feed
        assert result.text.index("Bitcoin four") < result.text.index("ETF three") < result.text.index("Bitcoin two")
        assert "Bitcoin one" not in result.text

    def test_second_run_skips_posted_items(self, config, store):
        session = feed_session(self.feed())
        run_news_job(config, store, MagicMock(), session=session)

        channel = MagicMock()
        result = run_news_job(config, store, channel, session=session)

        assert result.sent is False
        assert result.reason == "not_enough_relevant"
        assert result.count == 1
        channel.send.assert_not_called()

    def test_no_candidates(self, config, store):
        channel = MagicMock()
        result = run_news_job(config, store, channel, session=feed_session(rss_feed(["Weather"])))

        assert result.sent is False
        assert result.reason == "no_candidates"
        channel.send.assert_not_called()

    def test_failed_delivery_records_nothing(self, config, store):
        channel = MagicMock()
        channel.send.side_effect = DeliveryError("Telegram error")

        with pytest.raises(DeliveryError):
            run_news_job(config, store, channel, session=feed_session(self.feed()))

        assert store.count_posted() == 0

    def test_dry_run_renders_without_recording(self, config, store):
        result = run_news_job(config, store, None, session=feed_session(self.feed()))

        assert result.sent is False
        assert result.reason == "dry_run"
        assert "CRYPTO NEWS DIGEST" in result.text
        assert store.count_posted() == 0

    def test_translation_applied(self, config, store):
        translated = config.model_copy(update={"translate": True})
        session = feed_session(self.feed())
        session.get.return_value.json.return_value = [[["Bản dịch", "source"]]]

        result = run_news_job(translated, store, None, session=session)

        assert "Bản dịch" in result.text

    def test_trimmed_digest_below_min_items_is_not_sent(self, config, store):
        items = "".join(
            f"<item><title>Bitcoin story {i}</title>"
            f"<link>https://example.com/{i}?ref={'x' * 2500}</link>"
            f"<pubDate>Mon, 01 Jan 2024 0{i}:00:00 +0000</pubDate></item>"
            for i in range(3)
        )
        feed = f'<?xml version="1.0"?><rss version="2.0"><channel>{items}</channel></rss>'.encode()
        channel = MagicMock()

        result = run_news_job(config, store, channel, session=feed_session(feed))

        assert result.sent is False
        assert result.reason == "not_enough_relevant"
        assert result.count == 1
        channel.send.assert_not_called()
        assert store.count_posted() == 0
