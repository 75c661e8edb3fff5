"""
===============================================================================
BerkasRepositorySQLite – SQLite-backed case-file repository (read/write)
-------------------------------------------------------------------------------
Dates are stored as ISO text, QC gates as flattened columns, and every
write bumps the 'version' column.
===============================================================================
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import sqlite3

from core.common.errors import ConcurrentModificationError, NotFoundError, ValidationError
from core.helpers.date_time_helper import parse_utc_iso, to_utc_iso
from berkaslifecycle.models.berkas import Berkas
from berkaslifecycle.models.berkas_status import BerkasStatus
from berkaslifecycle.models.qc import QcDecision, QcRecord
from berkaslifecycle.models.section import ALL_FIELDS, DATE_FIELDS, NUMBER_FIELDS
from .base_sqlite_repo import BaseSQLiteRepo

_QC_COLUMNS = ("decision", "note", "decided_by", "decided_at")
_GATES = ("qc_kks", "qc_kasi")


def _field_type(name: str) -> str:
    return "REAL" if name in NUMBER_FIELDS else "TEXT"


def _ensure_schema(conn: sqlite3.Connection) -> None:
    field_cols = ",\n".join(
        f"            {name} {_field_type(name)}{' UNIQUE' if name == 'no_berkas' else ''}"
        for name in ALL_FIELDS
    )
    qc_cols = ",\n".join(f"            {g}_{c} TEXT" for g in _GATES for c in _QC_COLUMNS)
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS berkas (
            id TEXT PRIMARY KEY,
            status TEXT NOT NULL,
{field_cols},
{qc_cols},
            created_at TEXT,
            updated_at TEXT,
            version INTEGER NOT NULL DEFAULT 0
        );
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_berkas_status ON berkas(status)")


def _parse_date(txt: Optional[str]) -> Optional[date]:
    if not txt:
        return None
    return date.fromisoformat(txt[:10])


def _to_db(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in DATE_FIELDS:
        return value.isoformat() if isinstance(value, (date, datetime)) else str(value)
    return value


class BerkasRepositorySQLite(BaseSQLiteRepo):
    def __init__(self, db) -> None:
        super().__init__(db)
        with self.transaction() as conn:
            _ensure_schema(conn)

    # --------------- mapping --------------- #
    def _row_to_model(self, r: sqlite3.Row) -> Berkas:
        values: Dict[str, Any] = {}
        for name in ALL_FIELDS:
            raw = r[name]
            if name in DATE_FIELDS:
                values[name] = _parse_date(raw)
            elif name in NUMBER_FIELDS:
                values[name] = float(raw) if raw is not None else None
            else:
                values[name] = raw

        gates = {}
        for g in _GATES:
            decision = r[f"{g}_decision"]
            gates[g] = QcRecord(
                decision=QcDecision(decision) if decision else None,
                note=r[f"{g}_note"],
                decided_by=r[f"{g}_decided_by"],
                decided_at=parse_utc_iso(r[f"{g}_decided_at"]),
            )

        return Berkas(
            id=r["id"],
            status=BerkasStatus(r["status"]),
            **values,
            qc_kks=gates["qc_kks"],
            qc_kasi=gates["qc_kasi"],
            created_at=parse_utc_iso(r["created_at"]),
            updated_at=parse_utc_iso(r["updated_at"]),
            version=int(r["version"] or 0),
        )

    def _columns(self, b: Berkas) -> Dict[str, Any]:
        cols: Dict[str, Any] = {"status": b.status.value}
        for name in ALL_FIELDS:
            cols[name] = _to_db(name, getattr(b, name))
        for g in _GATES:
            rec: QcRecord = getattr(b, g)
            cols[f"{g}_decision"] = rec.decision.value if rec.decision else None
            cols[f"{g}_note"] = rec.note
            cols[f"{g}_decided_by"] = rec.decided_by
            cols[f"{g}_decided_at"] = to_utc_iso(rec.decided_at)
        cols["created_at"] = to_utc_iso(b.created_at)
        cols["updated_at"] = to_utc_iso(b.updated_at)
        return cols

    # --------------- READ --------------- #
    def get_by_id(self, berkas_id: str) -> Optional[Berkas]:
        r = self.conn.execute("SELECT * FROM berkas WHERE id = ?", (berkas_id,)).fetchone()
        return self._row_to_model(r) if r else None

    def search(self, query=None, status=None, limit=None) -> List[Berkas]:
        q = "SELECT * FROM berkas WHERE 1=1"
        params: list = []
        if query:
            like = f"%{query.strip()}%"
            q += (" AND (no_berkas LIKE ? OR nama_pemohon LIKE ? OR nib LIKE ?"
                  " OR desa LIKE ? OR kecamatan LIKE ?)")
            params += [like] * 5
        if status:
            q += " AND status = ?"; params.append(BerkasStatus(status).value)
        q += " ORDER BY COALESCE(updated_at, created_at) DESC, id"
        if limit is not None:
            q += " LIMIT ?"; params.append(int(limit))
        rows = self.conn.execute(q, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def count_by_status(self) -> Dict[BerkasStatus, int]:
        counts = {s: 0 for s in BerkasStatus}
        for r in self.conn.execute("SELECT status, COUNT(*) AS n FROM berkas GROUP BY status"):
            counts[BerkasStatus(r["status"])] = int(r["n"])
        return counts

    # --------------- WRITE --------------- #
    def insert(self, berkas: Berkas) -> None:
        cols = self._columns(berkas)
        cols["id"] = berkas.id
        cols["version"] = berkas.version
        names = ", ".join(cols)
        marks = ", ".join("?" for _ in cols)
        try:
            with self.transaction() as conn:
                conn.execute(f"INSERT INTO berkas ({names}) VALUES ({marks})", list(cols.values()))
        except sqlite3.IntegrityError as ex:
            raise ValidationError("Nomor berkas sudah terdaftar") from ex

    def update(self, berkas: Berkas, expected_version: Optional[int] = None) -> None:
        cols = self._columns(berkas)
        set_clause = ", ".join(f"{k} = ?" for k in cols) + ", version = version + 1"
        q = f"UPDATE berkas SET {set_clause} WHERE id = ?"
        params = list(cols.values()) + [berkas.id]
        if expected_version is not None:
            q += " AND version = ?"
            params.append(expected_version)
        try:
            with self.transaction() as conn:
                cur = conn.execute(q, params)
        except sqlite3.IntegrityError as ex:
            raise ValidationError("Nomor berkas sudah terdaftar") from ex
        if cur.rowcount == 0:
            if expected_version is not None and self.get_by_id(berkas.id) is not None:
                raise ConcurrentModificationError(
                    f"Berkas {berkas.id} diubah oleh pengguna lain (versi {expected_version})"
                )
            raise NotFoundError("Berkas tidak ditemukan")
        berkas.version += 1

    def delete(self, berkas_id: str) -> bool:
        with self.transaction() as conn:
            cur = conn.execute("DELETE FROM berkas WHERE id = ?", (berkas_id,))
            return cur.rowcount == 1
