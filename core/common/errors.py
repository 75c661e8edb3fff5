"""Application-wide exception hierarchy.

Each error carries a stable ``kind`` string so an outer layer (HTTP, CLI)
can map it to a response without matching on class names. Errors shared by
several features live here; workflow-specific ones are in
``berkaslifecycle.exceptions.errors``.
"""
from __future__ import annotations

from typing import Iterable, Optional, Tuple


class BerkasError(Exception):
    """Base exception for all application errors."""

    kind: str = "Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind


class UnauthenticatedError(BerkasError):
    """No valid, active actor could be resolved."""

    kind = "Unauthenticated"


class ForbiddenError(BerkasError):
    """The actor's role does not allow the action (or the touched sections)."""

    kind = "Forbidden"

    def __init__(
        self,
        message: str = "",
        *,
        action: Optional[str] = None,
        sections: Iterable[str] = (),
    ) -> None:
        super().__init__(message or "Anda tidak memiliki izin untuk aksi ini")
        self.action = action
        self.sections: Tuple[str, ...] = tuple(sections)


class NotFoundError(BerkasError):
    kind = "NotFound"


class ValidationError(BerkasError):
    """Bad input; ``missing`` lists required fields that were absent."""

    kind = "ValidationError"

    def __init__(self, message: str = "", *, missing: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.missing: Tuple[str, ...] = tuple(missing)


class TransientStorageError(BerkasError):
    """Retryable storage failure (locked database, I/O hiccup, timeout)."""

    kind = "TransientStorageError"


class ConcurrentModificationError(BerkasError):
    """The record changed between read and conditional write."""

    kind = "ConcurrentModification"
