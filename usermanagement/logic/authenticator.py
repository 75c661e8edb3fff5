"""
authenticator.py

Login / logout and session-token resolution.

A token is an opaque random string handed to the client once. The server
only keeps its digest plus an expiry; every request resolves the token back
to a live, active `User` which the caller then passes on as the actor.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from core.common.errors import UnauthenticatedError
from core.config.config_service import config_service
from core.contracts.auth import IAuthenticator
from core.helpers.date_time_helper import utc_now
from core.logging.logic.logger import logger
from core.models.user import User
from usermanagement.logic.session_repository import SessionRepository
from usermanagement.logic.user_repository import UserRepository


class Authenticator(IAuthenticator):
    """Session handling on top of UserRepository / SessionRepository."""

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        *,
        ttl_hours: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._ttl = timedelta(hours=ttl_hours if ttl_hours is not None else config_service.auth.session_ttl_hours)
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Login / Logout                                                     #
    # ------------------------------------------------------------------ #
    def login(self, email: str, password: str) -> str:
        if not email or not password:
            raise UnauthenticatedError("Email dan password wajib diisi")

        user = self._users.verify_login(email, password)
        if user is None:
            logger.log(feature="Auth", event="LoginFailed", level="WARNING",
                       username=email, message="Invalid credentials")
            raise UnauthenticatedError("Email atau password salah")
        if not user.active:
            logger.log(feature="Auth", event="LoginFailed", level="WARNING",
                       user_id=user.id, username=user.name, message="Account disabled")
            raise UnauthenticatedError("Akun tidak aktif")

        token = secrets.token_urlsafe(32)
        now = self._clock()
        self._sessions.add(token, user.id, now, now + self._ttl)
        logger.log(feature="Auth", event="LoginSuccess",
                   user_id=user.id, username=user.name, message="Login successful")
        return token

    def logout(self, token: str) -> None:
        if not token:
            return
        session = self._sessions.get(token)
        if self._sessions.delete(token) and session is not None:
            logger.log(feature="Auth", event="Logout",
                       user_id=session.user_id, message="User logged out")

    # ------------------------------------------------------------------ #
    # Resolution                                                         #
    # ------------------------------------------------------------------ #
    def resolve(self, token: Optional[str]) -> User:
        if not token:
            raise UnauthenticatedError("Authentication required")

        session = self._sessions.get(token)
        if session is None:
            raise UnauthenticatedError("Sesi tidak valid")
        if session.is_expired(self._clock()):
            self._sessions.delete(token)
            raise UnauthenticatedError("Sesi telah berakhir")

        user = self._users.get_by_id(session.user_id)
        if user is None or not user.active:
            raise UnauthenticatedError("Akun tidak aktif")
        return user
