"""
user.py

Defines the central User model and user roles.
All features should use this model for the acting user (actor) passed into
services; there is no process-wide "current user".
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional


class UserRole(Enum):
    """
    All roles known to the system. Each department of the land office maps to
    one role; QUALITY_CONTROL decides the KKS/KASI gates.
    """
    ADMIN = "ADMIN"
    DATA_BERKAS = "DATA_BERKAS"
    DATA_UKUR = "DATA_UKUR"
    DATA_PEMETAAN = "DATA_PEMETAAN"
    QUALITY_CONTROL = "QUALITY_CONTROL"

    @classmethod
    def parse(cls, value: "UserRole | str | None") -> Optional["UserRole"]:
        """Case-insensitive lookup; None for anything unknown."""
        if isinstance(value, UserRole):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class User:
    """
    A person who can log in and act on case files.

    The password hash never leaves the usermanagement package in practice,
    but it is kept on the model so repositories can round-trip the row.
    """

    def __init__(
        self,
        id: str,
        name: str,
        email: str,
        role: UserRole,
        password_hash: str = "",
        active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.role = role
        self.password_hash = password_hash
        self.active = active
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self):
        return (
            f"User({self.id}): {self.name} "
            f"Role: {self.role.value}, "
            f"Email: {self.email}, "
            f"Active: {self.active}"
        )

    def __repr__(self):
        return f"User(id={self.id!r}, name={self.name!r}, role={self.role.value})"

    def to_public_dict(self) -> dict:
        """Everything except the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "active": self.active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
