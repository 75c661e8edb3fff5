"""Case-file workflow exceptions.

Shared errors (authentication, authorization, validation, storage) are
defined in core.common.errors and re-exported here so callers of this
feature need a single import.
"""
from __future__ import annotations

from core.common.errors import (
    BerkasError,
    ConcurrentModificationError,
    ForbiddenError,
    NotFoundError,
    TransientStorageError,
    UnauthenticatedError,
    ValidationError,
)


class TerminalStateError(BerkasError):
    """The file is at SELESAI and can no longer change."""

    kind = "TerminalState"


class WrongGateStageError(BerkasError):
    """A QC decision was submitted for a gate the file is not parked at."""

    kind = "WrongGateStage"


class GatePrerequisiteUnmetError(BerkasError):
    """KASI was decided before KKS was accepted."""

    kind = "GatePrerequisiteUnmet"


__all__ = [
    "BerkasError",
    "ConcurrentModificationError",
    "ForbiddenError",
    "GatePrerequisiteUnmetError",
    "NotFoundError",
    "TerminalStateError",
    "TransientStorageError",
    "UnauthenticatedError",
    "ValidationError",
    "WrongGateStageError",
]
