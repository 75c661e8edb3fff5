"""
core/tests/test_db_interface.py

Transaction semantics of SQLiteRepository: commit, rollback, nesting and
mapping of transient sqlite errors.
"""

from __future__ import annotations

import sqlite3
import tempfile
import unittest
from pathlib import Path

from core.common.db_interface import SQLiteRepository, is_transient
from core.common.errors import TransientStorageError


class TestTransaction(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = SQLiteRepository(Path(self._tmp.name) / "nested" / "t.db")
        with self.repo.transaction() as conn:
            conn.execute("CREATE TABLE t (v TEXT)")

    def tearDown(self) -> None:
        self.repo.close()
        self._tmp.cleanup()

    def _values(self) -> list[str]:
        return [r["v"] for r in self.repo.conn.execute("SELECT v FROM t ORDER BY v")]

    def test_commit(self) -> None:
        with self.repo.transaction() as conn:
            conn.execute("INSERT INTO t VALUES ('a')")
        self.assertEqual(self._values(), ["a"])

    def test_rollback_on_error(self) -> None:
        with self.assertRaises(RuntimeError):
            with self.repo.transaction() as conn:
                conn.execute("INSERT INTO t VALUES ('a')")
                raise RuntimeError("boom")
        self.assertEqual(self._values(), [])

    def test_nested_joins_outer(self) -> None:
        with self.assertRaises(RuntimeError):
            with self.repo.transaction() as conn:
                conn.execute("INSERT INTO t VALUES ('outer')")
                with self.repo.transaction() as inner:
                    inner.execute("INSERT INTO t VALUES ('inner')")
                raise RuntimeError("boom")
        self.assertEqual(self._values(), [])

    def test_transient_error_is_mapped(self) -> None:
        with self.assertRaises(TransientStorageError):
            with self.repo.transaction():
                raise sqlite3.OperationalError("database is locked")

    def test_other_sqlite_errors_pass_through(self) -> None:
        with self.assertRaises(sqlite3.OperationalError):
            with self.repo.transaction() as conn:
                conn.execute("SELECT * FROM missing_table")


class TestIsTransient(unittest.TestCase):
    def test_markers(self) -> None:
        self.assertTrue(is_transient(sqlite3.OperationalError("database is locked")))
        self.assertTrue(is_transient(sqlite3.OperationalError("disk I/O error")))
        self.assertFalse(is_transient(sqlite3.OperationalError("no such table: x")))
        self.assertFalse(is_transient(sqlite3.IntegrityError("UNIQUE constraint failed")))
        self.assertFalse(is_transient(ValueError("database is locked")))


if __name__ == "__main__":
    unittest.main()
