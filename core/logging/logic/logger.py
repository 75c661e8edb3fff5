"""
core/logging/logic/logger.py
============================

Thread-safe singleton event logger with an SQLite backend.

Services pass the acting user explicitly; there is no ambient current user
to fall back on, so an omitted username is stored as "system".
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import closing
from pathlib import Path
from typing import List, Optional

from core.common.db_interface import DatabaseAccess, create_sqlite_connection
from core.config.config_service import config_service
from core.helpers.date_time_helper import utc_now
from core.logging.models.log_entry import LEVELS, LogEntry

_SCHEMA = """
CREATE TABLE IF NOT EXISTS logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    user_id TEXT,
    username TEXT,
    feature TEXT NOT NULL,
    event TEXT NOT NULL,
    reference_id TEXT,
    message TEXT,
    log_level TEXT NOT NULL DEFAULT 'INFO'
)
"""

_INSERT = """
INSERT INTO logs
    (timestamp, user_id, username, feature, event, reference_id, message, log_level)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

# filter keyword -> column
_FILTER_COLUMNS = (
    ("user_id", "user_id"),
    ("username", "username"),
    ("feature", "feature"),
    ("event", "event"),
    ("reference_id", "reference_id"),
    ("level", "log_level"),
)


# --------------------------------------------------------------------------- #
#  Singleton                                                                  #
# --------------------------------------------------------------------------- #
class Logger(DatabaseAccess):
    """Thread-safe singleton logger."""

    _instance: "Logger | None" = None
    _instance_lock = threading.Lock()

    def __new__(cls) -> "Logger":  # noqa: D401
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False  # type: ignore[attr-defined]
        return cls._instance  # type: ignore[return-value]

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        self._initialized = True

        self._write_lock = threading.Lock()
        self._db_path: Path = Path(config_service.database.logging)
        with closing(self.connect()) as conn:
            conn.execute(_SCHEMA)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_logs_reference ON logs(reference_id)")
            conn.commit()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        # short-lived connection per call; the log is written from many threads
        return create_sqlite_connection(self._db_path)

    # ------------------------------------------------------------------ #
    #  Write                                                             #
    # ------------------------------------------------------------------ #
    def log(
        self,
        feature: str,
        event: str,
        *,
        user_id: Optional[str] = None,
        username: Optional[str] = None,
        level: str = "INFO",
        reference_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        """Persist one event. *level* is one of DEBUG/INFO/WARNING/ERROR."""
        level = level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        entry = LogEntry(
            timestamp=utc_now(),
            feature=feature,
            event=event,
            log_level=level,
            user_id=user_id,
            username=username or "system",
            reference_id=reference_id,
            message=message,
        )
        with self._write_lock, closing(self.connect()) as conn:
            conn.execute(_INSERT, entry.to_row())
            conn.commit()

    # ------------------------------------------------------------------ #
    #  Read                                                              #
    # ------------------------------------------------------------------ #
    def fetch_logs(self, limit: int = 100) -> List[LogEntry]:
        return self.query_logs(limit=limit)

    def query_logs(
        self,
        *,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        limit: int = 1_000,
        **filters: Optional[str],
    ) -> List[LogEntry]:
        """
        Newest first. Equality *filters*: user_id, username, feature, event,
        reference_id, level. *start_time* / *end_time* are inclusive ISO UTC
        bounds.
        """
        unknown = set(filters) - {key for key, _ in _FILTER_COLUMNS}
        if unknown:
            raise TypeError(f"Unknown log filter(s): {', '.join(sorted(unknown))}")

        clauses: List[str] = []
        params: List[object] = []
        for key, column in _FILTER_COLUMNS:
            if filters.get(key) is not None:
                clauses.append(f"{column} = ?")
                params.append(filters[key])
        if start_time is not None:
            clauses.append("timestamp >= ?")
            params.append(start_time)
        if end_time is not None:
            clauses.append("timestamp <= ?")
            params.append(end_time)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        sql = f"SELECT * FROM logs{where} ORDER BY timestamp DESC, id DESC LIMIT ?"
        params.append(limit)

        with closing(self.connect()) as conn:
            return [LogEntry.from_row(row) for row in conn.execute(sql, params)]

    def clear_logs(self) -> None:
        with self._write_lock, closing(self.connect()) as conn:
            conn.execute("DELETE FROM logs")
            conn.commit()


# --------------------------------------------------------------------------- #
#  Global instance                                                            #
# --------------------------------------------------------------------------- #
logger: Logger = Logger()
