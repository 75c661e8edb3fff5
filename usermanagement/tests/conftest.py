"""Fixtures for account and session tests: real repositories on a
temporary database, an admin seeded directly through the repository."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.common.db_interface import SQLiteRepository
from core.models.user import UserRole
from usermanagement.logic.authenticator import Authenticator
from usermanagement.logic.session_repository import SessionRepository
from usermanagement.logic.user_manager import UserManager
from usermanagement.logic.user_repository import UserRepository

PASSWORD = "rahasia-123"


class Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 7, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def db(tmp_path):
    handle = SQLiteRepository(tmp_path / "users.db")
    yield handle
    handle.close()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def users(db) -> UserRepository:
    return UserRepository(db)


@pytest.fixture
def sessions(db) -> SessionRepository:
    return SessionRepository(db)


@pytest.fixture
def auth(users, sessions, clock) -> Authenticator:
    return Authenticator(users, sessions, ttl_hours=8, clock=clock)


@pytest.fixture
def manager(users, sessions) -> UserManager:
    return UserManager(users, sessions)


@pytest.fixture
def admin(users):
    return users.create(name="Admin", email="Admin@Example.com", password=PASSWORD, role=UserRole.ADMIN)


@pytest.fixture
def surveyor(users):
    return users.create(name="Joko", email="joko@example.com", password=PASSWORD, role=UserRole.DATA_UKUR)
