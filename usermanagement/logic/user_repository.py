"""
user_repository.py

Low-level SQLite access for user data. All CRUD helpers required by
UserManager and Authenticator are exposed here.

Passwords are stored as bcrypt hashes; the plain password never reaches
the table.
"""

from __future__ import annotations

import sqlite3
import uuid
from typing import List, Optional

import bcrypt

from core.common.db_interface import SQLiteRepository
from core.common.errors import ValidationError
from core.helpers.date_time_helper import parse_utc_iso, utc_now_iso
from core.logging.logic.logger import logger
from core.models.user import User, UserRole


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def check_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # malformed hash in the table
        return False


class UserRepository:
    """Complete CRUD layer for `User` entities."""

    # ------------------------------------------------------------------ #
    # Construction                                                       #
    # ------------------------------------------------------------------ #
    def __init__(self, db: SQLiteRepository) -> None:
        self._db = db
        self._ensure_table()

    # ------------------------------------------------------------------ #
    # Query helpers                                                      #
    # ------------------------------------------------------------------ #
    def get_by_id(self, user_id: str) -> Optional[User]:
        row = self._db.conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row)

    def get_by_email(self, email: str) -> Optional[User]:
        row = self._db.conn.execute(
            "SELECT * FROM users WHERE email = ?", (self._norm_email(email),)
        ).fetchone()
        return self._row_to_user(row)

    def get_all(self) -> List[User]:
        rows = self._db.conn.execute("SELECT * FROM users ORDER BY created_at DESC, name").fetchall()
        return [u for u in (self._row_to_user(r) for r in rows) if u is not None]

    # ------------------------------------------------------------------ #
    # Authentication                                                     #
    # ------------------------------------------------------------------ #
    def verify_login(self, email: str, password: str) -> Optional[User]:
        """User with matching credentials, active or not; None otherwise."""
        user = self.get_by_email(email)
        if user and check_password(password, user.password_hash):
            return user
        return None

    # ------------------------------------------------------------------ #
    # Create                                                             #
    # ------------------------------------------------------------------ #
    def create(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: UserRole,
        active: bool = True,
    ) -> User:
        now = utc_now_iso()
        user_id = uuid.uuid4().hex
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO users
                      (id, name, email, password_hash, role, active, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id,
                        name.strip(),
                        self._norm_email(email),
                        hash_password(password),
                        role.value,
                        1 if active else 0,
                        now,
                        now,
                    ),
                )
        except sqlite3.IntegrityError as ex:
            raise ValidationError("Email sudah terdaftar") from ex
        created = self.get_by_id(user_id)
        assert created is not None
        return created

    # ------------------------------------------------------------------ #
    # Update selective fields                                            #
    # ------------------------------------------------------------------ #
    def update_fields(self, user_id: str, updates: dict) -> bool:
        """
        Update name/email/role/active/password. *role* must already be a
        UserRole; *password* is hashed here.
        """
        columns: dict = {}
        if "name" in updates:
            columns["name"] = str(updates["name"]).strip()
        if "email" in updates:
            columns["email"] = self._norm_email(updates["email"])
        if "role" in updates:
            columns["role"] = updates["role"].value
        if "active" in updates:
            columns["active"] = 1 if updates["active"] else 0
        if "password" in updates:
            columns["password_hash"] = hash_password(updates["password"])
        if not columns:
            return self.get_by_id(user_id) is not None

        columns["updated_at"] = utc_now_iso()
        set_clause = ", ".join(f"{k}=?" for k in columns)
        params = list(columns.values()) + [user_id]
        try:
            with self._db.transaction() as conn:
                cur = conn.execute(f"UPDATE users SET {set_clause} WHERE id = ?", params)
                return cur.rowcount == 1
        except sqlite3.IntegrityError as ex:
            raise ValidationError("Email sudah terdaftar") from ex

    # ------------------------------------------------------------------ #
    # Delete                                                             #
    # ------------------------------------------------------------------ #
    def delete(self, user_id: str) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cur.rowcount == 1

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _norm_email(email: str) -> str:
        return str(email or "").strip().lower()

    def _ensure_table(self) -> None:
        with self._db.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    role TEXT NOT NULL,
                    active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    # ------------------------------------------------------------------ #
    # Row-mapper                                                         #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _row_to_user(row: sqlite3.Row | None) -> Optional[User]:
        if row is None:
            return None

        role = UserRole.parse(row["role"])
        if role is None:
            # unknown roles are not mapped to anything; such a row cannot act
            logger.log(
                feature="User",
                event="UnknownRole",
                level="WARNING",
                reference_id=row["id"],
                message=f"Unknown role '{row['role']}' for '{row['email']}'",
            )
            return None

        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=role,
            password_hash=row["password_hash"],
            active=bool(row["active"]),
            created_at=parse_utc_iso(row["created_at"]),
            updated_at=parse_utc_iso(row["updated_at"]),
        )
