"""Result stores for saved analyses.

Two implementations with the same observable behaviour:
- MemoryAnalysisStore: process-local, auto-incrementing ids.
- SqliteAnalysisStore: durable, table `seo_analyses`:
    - id (integer, primary key)
    - user_id (integer, nullable)
    - url (text)
    - record_json (text)
    - created_at (text)

A single store handle is built at startup by make_store() and handed to the
request handlers.
"""

import json
import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from config import Settings
from errors import PersistenceError
from models import TEXT_FIELDS, StoredAnalysis

logger = logging.getLogger(__name__)

_RECORD_FIELDS = ("user_id", "url", *TEXT_FIELDS, "seo_score", "audit_results", "ai_suggestions")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_record(data: dict, record_id: int, created_at: str) -> StoredAnalysis:
    """Normalise an insert payload: unset and empty values become None."""
    record: StoredAnalysis = {"id": record_id}
    for name in _RECORD_FIELDS:
        value = data.get(name)
        record[name] = value if value not in ("", None) else None
    record["created_at"] = created_at
    return record


class MemoryAnalysisStore:
    """Non-durable store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._records: dict[int, StoredAnalysis] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def save(self, data: dict) -> StoredAnalysis:
        with self._lock:
            record_id = self._next_id
            self._next_id += 1
        record = build_record(data, record_id, _now())
        self._records[record_id] = record
        return record

    def get(self, record_id: int) -> Optional[StoredAnalysis]:
        return self._records.get(record_id)

    def list_by_owner(self, user_id: int) -> list[StoredAnalysis]:
        rows = [r for r in self._records.values() if r.get("user_id") == user_id]
        return sorted(rows, key=lambda r: r["id"], reverse=True)


class SqliteAnalysisStore:
    """Durable store backed by a SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.init_db()

    def get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the seo_analyses table if it does not exist."""
        try:
            conn = self.get_connection()
        except sqlite3.Error as exc:
            raise PersistenceError(str(exc)) from exc
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS seo_analyses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER,
                    url TEXT NOT NULL,
                    record_json TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_seo_analyses_user ON seo_analyses (user_id)"
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(str(exc)) from exc
        finally:
            conn.close()

    def save(self, data: dict) -> StoredAnalysis:
        created_at = _now()
        record = build_record(data, 0, created_at)
        conn = self.get_connection()
        try:
            cursor = conn.execute(
                "INSERT INTO seo_analyses (user_id, url, record_json, created_at) VALUES (?, ?, ?, ?)",
                (record["user_id"], record["url"], json.dumps(record), created_at),
            )
            conn.commit()
            record["id"] = cursor.lastrowid
            return record
        except (sqlite3.Error, TypeError, ValueError) as exc:
            raise PersistenceError(str(exc)) from exc
        finally:
            conn.close()

    def _row_to_record(self, row: sqlite3.Row) -> StoredAnalysis:
        record = json.loads(row["record_json"])
        record["id"] = row["id"]
        return record

    def get(self, record_id: int) -> Optional[StoredAnalysis]:
        conn = self.get_connection()
        try:
            row = conn.execute(
                "SELECT id, record_json FROM seo_analyses WHERE id = ?",
                (record_id,),
            ).fetchone()
            return self._row_to_record(row) if row is not None else None
        except sqlite3.Error as exc:
            raise PersistenceError(str(exc)) from exc
        finally:
            conn.close()

    def list_by_owner(self, user_id: int) -> list[StoredAnalysis]:
        conn = self.get_connection()
        try:
            rows = conn.execute(
                """
                SELECT id, record_json
                FROM seo_analyses
                WHERE user_id = ?
                ORDER BY id DESC
                """,
                (user_id,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(str(exc)) from exc
        finally:
            conn.close()

        out: list[StoredAnalysis] = []
        for row in rows:
            try:
                out.append(self._row_to_record(row))
            except ValueError:
                logger.warning("Skipping unreadable analysis record id=%s", row["id"])
        return out


def make_store(settings: Settings):
    """Pick the store backend once, at startup."""
    if settings.store_backend == "sqlite":
        try:
            store = SqliteAnalysisStore(settings.db_path)
        except PersistenceError as exc:
            logger.warning("SQLite store unavailable (%s); using memory storage", exc)
            return MemoryAnalysisStore()
        logger.info("Using SQLite analysis store at %s", settings.db_path)
        return store
    logger.info("Using in-memory analysis store")
    return MemoryAnalysisStore()
