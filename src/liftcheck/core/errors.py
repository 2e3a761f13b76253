"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status and the short machine-readable code that
clients receive as ``{"error": code}``. Messages are for logs only and are
never sent to callers.
"""

from __future__ import annotations


class LiftCheckError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = 500
    code: str = "internal"
    # True when the same request may succeed if simply sent again.
    retryable: bool = False

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class InvalidPayloadError(LiftCheckError):
    """Request body is malformed or misses required fields."""

    status_code = 400
    code = "invalid_payload"


class UnauthorizedError(LiftCheckError):
    """Admin-only operation without a valid shared secret."""

    status_code = 401
    code = "unauthorized"


class NotFoundError(LiftCheckError):
    """Target record does not exist."""

    status_code = 404
    code = "not_found"


class ShareNotFoundError(NotFoundError):
    """The shared lift claim does not exist."""

    def __init__(self, share_id: str) -> None:
        super().__init__(f"Share {share_id!r} not found")
        self.share_id = share_id


class RateLimitedError(LiftCheckError):
    """Caller exhausted the fixed window for an action; retry after reset."""

    status_code = 429
    code = "rate_limited"

    def __init__(self, actor_id: str, action: str, retry_after: float | None = None) -> None:
        super().__init__(f"Rate limit exceeded for {action!r} by {actor_id!r}")
        self.actor_id = actor_id
        self.action = action
        self.retry_after = retry_after


class InternalError(LiftCheckError):
    """Unexpected failure; callers only ever see the generic code."""


class TransactionConflictError(InternalError):
    """Optimistic transaction kept colliding after every allowed retry."""

    retryable = True

    def __init__(self, label: str, attempts: int) -> None:
        super().__init__(f"Transaction {label!r} conflicted {attempts} times")
        self.label = label
        self.attempts = attempts
