"""SQLite cache for analysis engine output, keyed by text and settings."""

from __future__ import annotations

import hashlib
import json
import sqlite3
import time
from pathlib import Path

from paperwise.models.analysis import AnalysisSettings

DEFAULT_DB_PATH = Path.home() / ".paperwise" / "analysis_cache.db"
DEFAULT_TTL_DAYS = 7


def cache_key(text: str, settings: AnalysisSettings) -> str:
    payload = json.dumps({"text": text, "settings": settings.model_dump(mode="json")}, sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class AnalysisCache:
    """SQLite-backed cache of raw engine entries with TTL expiration."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ):
        self.db_path = Path(db_path)
        self.ttl_seconds = ttl_days * 86400
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS analysis_cache (
                    key TEXT PRIMARY KEY,
                    entries_json TEXT NOT NULL,
                    cached_at REAL NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def get(self, text: str, settings: AnalysisSettings) -> list[dict] | None:
        """Get cached entries for this exact text and settings if not expired."""
        key = cache_key(text, settings)
        with self._connect() as conn:
            row = conn.execute(
                "SELECT entries_json, cached_at FROM analysis_cache WHERE key = ?",
                (key,),
            ).fetchone()

        if row is None:
            return None

        entries_json, cached_at = row
        if time.time() - cached_at > self.ttl_seconds:
            self._delete(key)
            return None

        return json.loads(entries_json)

    def put(self, text: str, settings: AnalysisSettings, entries: list[dict]) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO analysis_cache
                   (key, entries_json, cached_at)
                   VALUES (?, ?, ?)""",
                (cache_key(text, settings), json.dumps(entries, ensure_ascii=False), time.time()),
            )

    def _delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM analysis_cache WHERE key = ?", (key,))

    def clear(self) -> int:
        """Clear all cached entries. Returns count of deleted rows."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM analysis_cache")
            return cursor.rowcount

    def stats(self) -> dict:
        """Return cache statistics."""
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) FROM analysis_cache").fetchone()[0]
            expired = conn.execute(
                "SELECT COUNT(*) FROM analysis_cache WHERE ? - cached_at > ?",
                (time.time(), self.ttl_seconds),
            ).fetchone()[0]
        return {"total": total, "expired": expired, "active": total - expired}
