"""
log_entry.py

One row of the application event log.

Rows are written by `Logger.log` and read back by `Logger.query_logs`;
`as_dict()` adds the local display time next to the stored UTC value.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

import core.helpers.date_time_helper as dt

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True, frozen=True)
class LogEntry:
    timestamp: datetime
    feature: str
    event: str
    log_level: str = "INFO"
    user_id: Optional[str] = None
    username: Optional[str] = None
    reference_id: Optional[str] = None
    message: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LogEntry":
        return cls(
            id=row["id"],
            timestamp=dt.parse_utc_iso(row["timestamp"]),
            feature=row["feature"],
            event=row["event"],
            log_level=row["log_level"] or "INFO",
            user_id=row["user_id"],
            username=row["username"],
            reference_id=row["reference_id"],
            message=row["message"],
        )

    def to_row(self) -> Tuple[Any, ...]:
        """Insert parameters in `logs` column order (without id)."""
        return (
            dt.to_utc_iso(self.timestamp),
            self.user_id,
            self.username,
            self.feature,
            self.event,
            self.reference_id,
            self.message,
            self.log_level,
        )

    def is_problem(self) -> bool:
        return self.log_level in ("WARNING", "ERROR")

    def as_dict(self) -> dict:
        utc_iso = dt.to_utc_iso(self.timestamp)
        return {
            "id": self.id,
            "timestamp_utc": utc_iso,
            "timestamp": dt.utc_to_local_str(utc_iso),
            "log_level": self.log_level,
            "user_id": self.user_id,
            "username": self.username,
            "feature": self.feature,
            "event": self.event,
            "reference_id": self.reference_id,
            "message": self.message,
        }
