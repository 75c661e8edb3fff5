"""
user_manager.py

Business logic for user (petugas) administration. Every operation is
restricted to ADMIN. *All* events are logged here, never in callers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.common.errors import ForbiddenError, NotFoundError, ValidationError
from core.contracts.auth import IUserManager
from core.logging.logic.logger import logger
from core.models.user import User, UserRole
from usermanagement.logic.session_repository import SessionRepository
from usermanagement.logic.user_repository import UserRepository

EDITABLE_FIELDS = ("name", "email", "role", "active", "password")


class UserManager(IUserManager):
    """Admin-only user CRUD."""

    def __init__(self, users: UserRepository, sessions: Optional[SessionRepository] = None) -> None:
        self._repo = users
        self._sessions = sessions

    # ------------------------------------------------------------------ #
    # Query                                                              #
    # ------------------------------------------------------------------ #
    def list_users(self, actor: User) -> List[User]:
        self._require_admin(actor, "list")
        return self._repo.get_all()

    def get_user(self, actor: User, user_id: str) -> Optional[User]:
        self._require_admin(actor, "view")
        return self._repo.get_by_id(user_id)

    # ------------------------------------------------------------------ #
    # Create                                                             #
    # ------------------------------------------------------------------ #
    def create_user(self, actor: User, data: Dict[str, Any]) -> User:
        self._require_admin(actor, "create")

        missing = [k for k in ("name", "email", "password", "role") if not str(data.get(k) or "").strip()]
        if missing:
            raise ValidationError("Nama, email, password, dan role wajib diisi", missing=missing)
        role = self._parse_role(data["role"])

        if self._repo.get_by_email(data["email"]):
            logger.log(feature="User", event="CreateFailed", level="WARNING",
                       user_id=actor.id, username=actor.name,
                       message=f"Email '{data['email']}' already exists")
            raise ValidationError("Email sudah terdaftar")

        user = self._repo.create(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            role=role,
            active=bool(data.get("active", True)),
        )
        logger.log(feature="User", event="UserCreated",
                   user_id=actor.id, username=actor.name, reference_id=user.id,
                   message=f"Created user '{user.email}' ({user.role.value})")
        return user

    # ------------------------------------------------------------------ #
    # Update                                                             #
    # ------------------------------------------------------------------ #
    def update_user(self, actor: User, user_id: str, updates: Dict[str, Any]) -> User:
        self._require_admin(actor, "update")

        changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS and v is not None}
        if "role" in changes:
            changes["role"] = self._parse_role(changes["role"])
        if "password" in changes and not str(changes["password"]).strip():
            raise ValidationError("Password tidak boleh kosong", missing=["password"])
        if "email" in changes:
            other = self._repo.get_by_email(changes["email"])
            if other is not None and other.id != user_id:
                raise ValidationError("Email sudah terdaftar")

        if not self._repo.update_fields(user_id, changes):
            raise NotFoundError("User tidak ditemukan")

        # a disabled account loses its sessions right away
        if changes.get("active") is False and self._sessions is not None:
            self._sessions.delete_for_user(user_id)

        logger.log(feature="User", event="UserUpdated",
                   user_id=actor.id, username=actor.name, reference_id=user_id,
                   message="Updated: " + (", ".join(sorted(changes)) or "-"))
        updated = self._repo.get_by_id(user_id)
        if updated is None:
            raise NotFoundError("User tidak ditemukan")
        return updated

    # ------------------------------------------------------------------ #
    # Delete                                                             #
    # ------------------------------------------------------------------ #
    def delete_user(self, actor: User, user_id: str) -> None:
        self._require_admin(actor, "delete")
        if actor.id == user_id:
            raise ValidationError("Tidak dapat menghapus akun sendiri")

        if not self._repo.delete(user_id):
            raise NotFoundError("User tidak ditemukan")
        if self._sessions is not None:
            self._sessions.delete_for_user(user_id)
        logger.log(feature="User", event="UserDeleted",
                   user_id=actor.id, username=actor.name, reference_id=user_id,
                   message=f"Deleted user '{user_id}'")

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _parse_role(raw: Any) -> UserRole:
        role = UserRole.parse(raw)
        if role is None:
            valid = ", ".join(r.value for r in UserRole)
            raise ValidationError(f"Role tidak valid. Pilihan: {valid}")
        return role

    @staticmethod
    def _require_admin(actor: User, action: str) -> None:
        if actor is None or actor.role is not UserRole.ADMIN:
            logger.log(feature="User", event="Denied", level="WARNING",
                       user_id=getattr(actor, "id", None), username=getattr(actor, "name", None),
                       message=f"User administration '{action}' requires ADMIN")
            raise ForbiddenError("Hanya ADMIN yang dapat mengelola petugas", action=action)
