"""
core/common/db_interface.py
===========================

Shared interface + helpers for SQLite-backed modules.

`SQLiteRepository.transaction()` is the single place where a write is
committed or rolled back. Several repositories may share one instance so that
a record update and its audit entry land in the same transaction.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Iterator, Optional
import sqlite3

from core.common.errors import TransientStorageError

# sqlite3.OperationalError messages that indicate a retryable condition
_TRANSIENT_MARKERS = (
    "database is locked",
    "database table is locked",
    "busy",
    "disk i/o error",
    "timeout",
    "unable to open database file",
)


def is_transient(exc: BaseException) -> bool:
    """True if *exc* is an sqlite error worth retrying."""
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    msg = str(exc).lower()
    return any(marker in msg for marker in _TRANSIENT_MARKERS)


def create_sqlite_connection(
    db_path: Path | str,
    *,
    check_same_thread: bool = False,
    foreign_keys: bool = False,
) -> sqlite3.Connection:
    """Create a sqlite3 connection with common defaults."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    if foreign_keys:
        conn.execute("PRAGMA foreign_keys = ON")
    return conn


class DatabaseAccess(ABC):
    """Interface for modules that depend on a database."""

    @property
    @abstractmethod
    def db_path(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> sqlite3.Connection:
        raise NotImplementedError


class SQLiteRepository(DatabaseAccess):
    """Default SQLite implementation with a shared, lazily created connection."""

    def __init__(
        self,
        db_path: Path | str,
        *,
        check_same_thread: bool = False,
        foreign_keys: bool = False,
    ) -> None:
        self._db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._check_same_thread = check_same_thread
        self._foreign_keys = foreign_keys
        self._lock = RLock()
        self._depth = 0

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def conn(self) -> sqlite3.Connection:
        return self.connect()

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = create_sqlite_connection(
                self._db_path,
                check_same_thread=self._check_same_thread,
                foreign_keys=self._foreign_keys,
            )
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Commit on success, roll back on any error.

        Nested use joins the outer transaction. Transient sqlite errors are
        re-raised as TransientStorageError; everything else propagates as is.
        """
        with self._lock:
            conn = self.connect()
            outer = self._depth == 0
            self._depth += 1
            try:
                yield conn
                if outer:
                    conn.commit()
            except sqlite3.Error as ex:
                if outer:
                    conn.rollback()
                if is_transient(ex):
                    raise TransientStorageError(str(ex)) from ex
                raise
            except BaseException:
                if outer:
                    conn.rollback()
                raise
            finally:
                self._depth -= 1

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None
