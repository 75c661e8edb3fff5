"""core/contracts/auth.py
=====================

Authentication / user administration contracts.

Sessions are identified by an opaque token handed out at login. Every
business call resolves the token to a `User` and passes that user on
explicitly as the actor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from core.models.user import User


class IAuthenticator(ABC):
    """Login / session resolution."""

    @abstractmethod
    def login(self, email: str, password: str) -> str:
        """Verify credentials and return a new session token."""

    @abstractmethod
    def resolve(self, token: Optional[str]) -> User:
        """Return the active user behind *token* or raise UnauthenticatedError."""

    @abstractmethod
    def logout(self, token: str) -> None:
        """Revoke the session (idempotent)."""


class IUserManager(ABC):
    """User (petugas) administration; every call is admin only."""

    @abstractmethod
    def list_users(self, actor: User) -> List[User]:
        """Return all users."""

    @abstractmethod
    def create_user(self, actor: User, data: Dict[str, Any]) -> User:
        """Create a user from name, email, password, role."""

    @abstractmethod
    def update_user(self, actor: User, user_id: str, updates: Dict[str, Any]) -> User:
        """Update name, email, role, active and/or password."""

    @abstractmethod
    def delete_user(self, actor: User, user_id: str) -> None:
        """Delete a user by id."""

    @abstractmethod
    def get_user(self, actor: User, user_id: str) -> Optional[User]:
        """Lookup user by id."""
