"""SQLite data store for MarketPulse news deduplication."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Iterable

from marketpulse.models import NewsItem


class DataStore:
    """SQLite-backed record of news links already delivered.

    Links are content-addressed by the SHA-1 hash of their URL.
    """

    REQUIRED_TABLES = [
        "posted",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS posted (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    url_hash TEXT NOT NULL UNIQUE,
                    url TEXT NOT NULL,
                    title TEXT,
                    source TEXT,
                    published_at TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Posted news ====================

    def is_posted(self, url_hash: str) -> bool:
        """Check whether a link hash has already been delivered."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM posted WHERE url_hash = ?", (url_hash,))
            return cursor.fetchone() is not None
        finally:
            conn.close()

    def mark_posted(self, items: Iterable[NewsItem]) -> int:
        """Record delivered items in one transaction.

        Hashes already present are left untouched.

        Args:
            items: News items that were sent.

        Returns:
            Number of newly recorded items.
        """
        created_at = datetime.now().isoformat()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            inserted = 0
            for item in items:
                cursor.execute(
                    """
                    INSERT OR IGNORE INTO posted
                    (url_hash, url, title, source, published_at, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.url_hash,
                        item.link,
                        item.title,
                        item.source,
                        item.published_at.isoformat() if item.published_at else "",
                        created_at,
                    ),
                )
                inserted += cursor.rowcount
            conn.commit()
            return inserted
        finally:
            conn.close()

    def count_posted(self) -> int:
        """Number of recorded links."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS n FROM posted")
            return cursor.fetchone()["n"]
        finally:
            conn.close()
