"""Bounded retry loop around short optimistic transactions."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from liftcheck.core.errors import TransactionConflictError
from liftcheck.core.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Version-id mismatches and primary-key races are the two ways concurrent
# writers collide on the rows this service touches.
CONFLICT_ERRORS: tuple[type[Exception], ...] = (StaleDataError, IntegrityError)


def run_transaction(
    session_factory: sessionmaker[Session],
    work: Callable[[Session], T],
    *,
    label: str,
    max_attempts: int | None = None,
    backoff_seconds: float | None = None,
) -> T:
    """Run ``work`` inside its own transaction, retrying on write conflicts.

    Each attempt opens a fresh session so the retried read sees the winner's
    committed state. ``work`` must not commit; the transaction commits when it
    returns and rolls back when it raises.

    Args:
        session_factory: Factory producing sessions bound to the store.
        work: Read-modify-write callable scoped to a single entity.
        label: Short name used in logs and in the escalated error.
        max_attempts: Attempts before giving up (defaults to settings).
        backoff_seconds: Base delay, doubled after every conflict.

    Returns:
        Whatever ``work`` returned on the committed attempt.

    Raises:
        TransactionConflictError: If every attempt collided.
    """
    attempts = max_attempts if max_attempts is not None else settings.transaction_max_attempts
    delay = (
        backoff_seconds if backoff_seconds is not None else settings.transaction_backoff_seconds
    )

    for attempt in range(1, attempts + 1):
        try:
            with session_factory.begin() as db:
                return work(db)
        except CONFLICT_ERRORS as exc:
            if attempt >= attempts:
                logger.warning(
                    "Transaction %s gave up after %d conflicting attempts: %s",
                    label,
                    attempt,
                    exc.__class__.__name__,
                )
                raise TransactionConflictError(label, attempt) from exc
            logger.debug("Transaction %s conflicted on attempt %d, retrying", label, attempt)
            if delay:
                time.sleep(delay * (2 ** (attempt - 1)))

    raise TransactionConflictError(label, attempts)  # pragma: no cover - loop always returns
