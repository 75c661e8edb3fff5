"""
session_repository.py

Server-side login sessions. Only a SHA-256 digest of the token is stored,
so a leaked table does not hand out usable bearer tokens.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.common.db_interface import SQLiteRepository
from core.helpers.date_time_helper import parse_utc_iso, to_utc_iso


def digest_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass(slots=True)
class Session:
    token_hash: str
    user_id: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionRepository:
    def __init__(self, db: SQLiteRepository) -> None:
        self._db = db
        self._ensure_table()

    def add(self, token: str, user_id: str, created_at: datetime, expires_at: datetime) -> None:
        with self._db.transaction() as conn:
            conn.execute(
                "INSERT INTO sessions (token_hash, user_id, created_at, expires_at) VALUES (?, ?, ?, ?)",
                (digest_token(token), user_id, to_utc_iso(created_at), to_utc_iso(expires_at)),
            )

    def get(self, token: str) -> Optional[Session]:
        row = self._db.conn.execute(
            "SELECT * FROM sessions WHERE token_hash = ?", (digest_token(token),)
        ).fetchone()
        if row is None:
            return None
        return Session(
            token_hash=row["token_hash"],
            user_id=row["user_id"],
            created_at=parse_utc_iso(row["created_at"]),
            expires_at=parse_utc_iso(row["expires_at"]),
        )

    def delete(self, token: str) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute("DELETE FROM sessions WHERE token_hash = ?", (digest_token(token),))
            return cur.rowcount == 1

    def delete_for_user(self, user_id: str) -> int:
        with self._db.transaction() as conn:
            return conn.execute("DELETE FROM sessions WHERE user_id = ?", (user_id,)).rowcount

    def purge_expired(self, now: datetime) -> int:
        with self._db.transaction() as conn:
            return conn.execute(
                "DELETE FROM sessions WHERE expires_at <= ?", (to_utc_iso(now),)
            ).rowcount

    def _ensure_table(self) -> None:
        with self._db.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS sessions (
                    token_hash TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id)")
