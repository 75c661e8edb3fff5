"""
===============================================================================
AuditRepositorySQLite – append-only status history
-------------------------------------------------------------------------------
No foreign key to 'berkas': entries outlive the file they describe.
===============================================================================
"""
from __future__ import annotations
from dataclasses import replace
from typing import Dict, Iterable, List
import sqlite3

from core.helpers.date_time_helper import parse_utc_iso, to_utc_iso
from berkaslifecycle.models.audit_entry import AuditEntry
from .base_sqlite_repo import BaseSQLiteRepo

# keep IN (...) lists below SQLite's bound-parameter limit
_CHUNK = 500


def _ensure_schema(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS audit_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            berkas_id TEXT NOT NULL,
            status_before TEXT NOT NULL,
            status_after TEXT NOT NULL,
            actor_name TEXT NOT NULL,
            note TEXT NOT NULL,
            forwarded_to TEXT,
            created_at TEXT NOT NULL
        );
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_audit_berkas ON audit_log(berkas_id, created_at)")


class AuditRepositorySQLite(BaseSQLiteRepo):
    def __init__(self, db) -> None:
        super().__init__(db)
        with self.transaction() as conn:
            _ensure_schema(conn)

    @staticmethod
    def _row_to_model(r: sqlite3.Row) -> AuditEntry:
        return AuditEntry(
            id=int(r["id"]),
            berkas_id=r["berkas_id"],
            status_before=r["status_before"],
            status_after=r["status_after"],
            actor_name=r["actor_name"],
            note=r["note"],
            created_at=parse_utc_iso(r["created_at"]),
            forwarded_to=r["forwarded_to"],
        )

    def append(self, entry: AuditEntry) -> AuditEntry:
        with self.transaction() as conn:
            cur = conn.execute(
                """
                INSERT INTO audit_log
                    (berkas_id, status_before, status_after, actor_name, note, forwarded_to, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.berkas_id,
                    entry.status_before,
                    entry.status_after,
                    entry.actor_name,
                    entry.note,
                    entry.forwarded_to,
                    to_utc_iso(entry.created_at),
                ),
            )
        return replace(entry, id=cur.lastrowid)

    def list_for(self, berkas_id: str) -> List[AuditEntry]:
        rows = self.conn.execute(
            "SELECT * FROM audit_log WHERE berkas_id = ? ORDER BY created_at, id",
            (berkas_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def latest_for_many(self, berkas_ids: Iterable[str]) -> Dict[str, AuditEntry]:
        ids = list(dict.fromkeys(berkas_ids))
        result: Dict[str, AuditEntry] = {}
        for start in range(0, len(ids), _CHUNK):
            chunk = ids[start:start + _CHUNK]
            marks = ", ".join("?" for _ in chunk)
            rows = self.conn.execute(
                f"""
                SELECT * FROM (
                    SELECT a.*, ROW_NUMBER() OVER (
                        PARTITION BY berkas_id ORDER BY created_at DESC, id DESC
                    ) AS rn
                    FROM audit_log a
                    WHERE berkas_id IN ({marks})
                ) WHERE rn = 1
                """,
                chunk,
            ).fetchall()
            for r in rows:
                result[r["berkas_id"]] = self._row_to_model(r)
        return result
