"""Bounded retry of whole transactions on persistence conflicts.

Only ``TransactionConflictError`` is retried.  Each attempt re-enters the
unit of work and runs the operation from the top, so it re-reads the
order's current status instead of replaying a stale inventory write.
Business errors propagate on the first attempt.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from storefront.domain.exceptions import TransactionConflictError
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy for transactional operations."""

    max_attempts: int = 3
    backoff_seconds: float = 0.05

    def delay(self, attempt: int) -> float:
        """Exponential backoff before attempt ``attempt + 1``."""
        return self.backoff_seconds * (2 ** (attempt - 1))


def run_in_transaction(
    uow: UnitOfWork,
    operation: Callable[[UnitOfWork], T],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run *operation* inside ``uow`` and commit, retrying on conflicts.

    The operation must do all of its reads inside the call; it is expected
    to map domain objects to DTOs before returning.
    """
    policy = policy or RetryPolicy()
    attempt = 1
    while True:
        try:
            with uow:
                result = operation(uow)
                uow.commit()
            return result
        except TransactionConflictError as exc:
            if attempt >= policy.max_attempts:
                logger.error(
                    "Transaction conflict persisted after %d attempts: %s",
                    attempt,
                    exc,
                )
                raise
            delay = policy.delay(attempt)
            logger.warning(
                "Transaction conflict (attempt %d/%d), retrying in %.2fs: %s",
                attempt,
                policy.max_attempts,
                delay,
                exc,
            )
            sleep(delay)
            attempt += 1
