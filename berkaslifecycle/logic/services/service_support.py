"""
Shared plumbing for the case-file services: actor checks, denial logging,
and the transactional write runner with bounded retry.
"""
from __future__ import annotations

from typing import Callable, Optional, TypeVar

from core.common.db_interface import SQLiteRepository
from core.common.db_retry import with_retry
from core.common.errors import ForbiddenError, UnauthenticatedError
from core.config.config_service import config_service
from core.logging.logic.logger import logger
from core.models.user import User
from berkaslifecycle.logic.policy.role_policy import BerkasAction, RolePolicy

T = TypeVar("T")

FEATURE = "Berkas"


def require_actor(actor: Optional[User]) -> User:
    """Disabled or missing actors are rejected before any role check."""
    if actor is None or not getattr(actor, "active", False):
        raise UnauthenticatedError("Authentication required")
    return actor


def log_denied(actor: User, action: str, message: str, berkas_id: Optional[str] = None) -> None:
    logger.log(
        feature=FEATURE,
        event="Denied",
        level="WARNING",
        user_id=actor.id,
        username=actor.name,
        reference_id=berkas_id,
        message=f"{action}: {message}",
    )


def require_action(actor: Optional[User], action: BerkasAction, berkas_id: Optional[str] = None) -> User:
    user = require_actor(actor)
    if not RolePolicy.can_perform(user.role, action):
        log_denied(user, action.value, f"role {user.role.value} lacks '{action.value}'", berkas_id)
        raise ForbiddenError(
            f"Role {user.role.value} tidak memiliki izin '{action.value}'",
            action=action.value,
        )
    return user


class WriteRunner:
    """
    Run a read-modify-write unit inside one transaction, retrying the whole
    unit on transient storage errors only.
    """

    def __init__(
        self,
        db: SQLiteRepository,
        *,
        max_retries: Optional[int] = None,
        delay_ms: Optional[int] = None,
        backoff: Optional[float] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        wf = config_service.workflow
        self._db = db
        self._max_retries = wf.retry_max if max_retries is None else max_retries
        self._delay_ms = wf.retry_delay_ms if delay_ms is None else delay_ms
        self._backoff = wf.retry_backoff if backoff is None else backoff
        self._sleep = sleep

    def __call__(self, unit: Callable[[], T]) -> T:
        def attempt() -> T:
            with self._db.transaction():
                return unit()

        return with_retry(
            attempt,
            max_retries=self._max_retries,
            delay_ms=self._delay_ms,
            backoff=self._backoff,
            sleep=self._sleep,
        )
