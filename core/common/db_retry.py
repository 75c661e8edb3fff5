"""
core/common/db_retry.py
=======================

Bounded retry with exponential backoff for storage calls.

Only TransientStorageError is retried. Domain errors (authorization,
validation, state) pass straight through on the first attempt.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

from core.common.errors import TransientStorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retry(
    fn: Callable[[], T],
    *,
    max_retries: int = 3,
    delay_ms: int = 100,
    backoff: float = 2.0,
    retry_on: Tuple[Type[BaseException], ...] = (TransientStorageError,),
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """
    Call *fn* and retry it up to *max_retries* times on a retryable error.

    Wait before retry n (0-based) is ``delay_ms * backoff ** n`` milliseconds.
    The last error is re-raised once the attempts are exhausted.
    """
    pause = sleep or time.sleep
    attempt = 0
    while True:
        try:
            return fn()
        except retry_on as ex:
            if attempt >= max_retries:
                logger.error("Storage operation failed after %d attempts: %s", attempt + 1, ex)
                raise
            wait_ms = delay_ms * (backoff ** attempt)
            logger.warning(
                "Storage operation failed (attempt %d/%d), retrying in %.0f ms: %s",
                attempt + 1, max_retries + 1, wait_ms, ex,
            )
            pause(wait_ms / 1000.0)
            attempt += 1
