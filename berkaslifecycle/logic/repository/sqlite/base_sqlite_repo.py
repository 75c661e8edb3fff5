"""
===============================================================================
Base SQLite Repository – shared connection for the case-file feature
-------------------------------------------------------------------------------
Purpose:
    All repositories of this feature share ONE core SQLiteRepository so that
    a record write and its audit entry can commit in the same transaction.

Integration:
    - open_database() builds the shared handle from [Database] berkas.
    - Concrete repositories inherit from BaseSQLiteRepo and use `self.conn`
      for reads and `self.transaction()` for writes.
===============================================================================
"""
from __future__ import annotations
import sqlite3
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Optional

from core.common.db_interface import SQLiteRepository
from core.config.config_service import config_service


def open_database(db_path: Optional[Path | str] = None) -> SQLiteRepository:
    """Shared handle; defaults to the configured berkas database."""
    return SQLiteRepository(db_path or config_service.database.berkas)


class BaseSQLiteRepo:
    """
    Thin base to share one SQLiteRepository across repositories.

    Properties
    ----------
    conn : sqlite3.Connection
        The shared connection (Row factory).
    db : SQLiteRepository
        The shared handle, exposed for callers that need a transaction.
    """

    def __init__(self, db: SQLiteRepository) -> None:
        self._db = db

    @property
    def db(self) -> SQLiteRepository:
        return self._db

    @property
    def conn(self) -> sqlite3.Connection:
        return self._db.conn

    def transaction(self) -> AbstractContextManager[sqlite3.Connection]:
        return self._db.transaction()
