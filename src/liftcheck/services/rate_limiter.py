"""Fixed-window rate limiting backed by the transactional store.

Counters live in ``rate_limit_counter`` rows keyed by ``(actor_id, action)``;
nothing is cached in process memory, so every worker sees the same window.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session, sessionmaker

from liftcheck.core.errors import RateLimitedError
from liftcheck.core.settings import Settings, settings
from liftcheck.db.time import as_utc, utcnow
from liftcheck.db.transaction import run_transaction
from liftcheck.models import RateLimitCounter

logger = logging.getLogger(__name__)

ACTION_VOTE = "vote"
ACTION_SHARE = "share"


@dataclass(frozen=True)
class RateLimitPolicy:
    """At most ``limit`` actions per non-overlapping ``window``."""

    limit: int
    window: timedelta


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single admission check."""

    allowed: bool
    count: int
    limit: int
    window_start: datetime
    reset_at: datetime

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count) if self.allowed else 0

    def retry_after(self, now: datetime) -> float:
        """Seconds until the current window rolls over."""
        return max(0.0, (self.reset_at - now).total_seconds())


def policies_from_settings(config: Settings | None = None) -> dict[str, RateLimitPolicy]:
    """Build the per-action policy table from configuration."""
    config = config or settings
    return {
        action: RateLimitPolicy(limit=limit, window=window)
        for action, (limit, window) in config.rate_limit_windows.items()
    }


class RateLimiter:
    """Admit or deny actions per actor using one atomic counter transaction."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        policies: Mapping[str, RateLimitPolicy] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._policies = dict(policies) if policies is not None else policies_from_settings()
        self._clock = clock

    def policy_for(self, action: str) -> RateLimitPolicy:
        try:
            return self._policies[action]
        except KeyError:
            raise ValueError(f"No rate limit policy configured for action {action!r}") from None

    def admit(self, actor_id: str, action: str) -> RateLimitDecision:
        """Count one attempt by ``actor_id`` and decide whether it is allowed.

        The recomputed window is persisted on every decision, denials
        included; a denied attempt leaves the count pinned at the limit.
        """
        policy = self.policy_for(action)

        def _work(db: Session) -> RateLimitDecision:
            now = self._clock()
            counter = db.get(RateLimitCounter, (actor_id, action))
            if counter is None:
                counter = RateLimitCounter(
                    actor_id=actor_id,
                    action=action,
                    window_start=now,
                    count=0,
                )
                db.add(counter)

            window_start = as_utc(counter.window_start)
            if now - window_start >= policy.window:
                # Window expired: start a fresh one at this attempt.
                window_start = now
                count = 1
            else:
                count = counter.count + 1

            allowed = count <= policy.limit
            counter.window_start = window_start
            counter.count = min(count, policy.limit)
            db.flush()

            return RateLimitDecision(
                allowed=allowed,
                count=counter.count,
                limit=policy.limit,
                window_start=window_start,
                reset_at=window_start + policy.window,
            )

        decision = run_transaction(
            self._session_factory,
            _work,
            label=f"rate_limit:{action}",
        )
        if not decision.allowed:
            logger.info("Rate limit hit: actor=%s action=%s limit=%d", actor_id, action, policy.limit)
        return decision

    def peek(self, actor_id: str, action: str) -> RateLimitDecision:
        """Report whether one more attempt would be admitted, without counting it."""
        policy = self.policy_for(action)
        now = self._clock()
        with self._session_factory() as db:
            counter = db.get(RateLimitCounter, (actor_id, action))
            if counter is None or now - as_utc(counter.window_start) >= policy.window:
                window_start, count = now, 0
            else:
                window_start, count = as_utc(counter.window_start), counter.count
        return RateLimitDecision(
            allowed=count < policy.limit,
            count=count,
            limit=policy.limit,
            window_start=window_start,
            reset_at=window_start + policy.window,
        )

    def ensure_available(self, actor_id: str, action: str) -> RateLimitDecision:
        """Like :meth:`peek` but raise :class:`RateLimitedError` when exhausted."""
        decision = self.peek(actor_id, action)
        if not decision.allowed:
            raise RateLimitedError(
                actor_id,
                action,
                retry_after=decision.retry_after(self._clock()),
            )
        return decision

    def check(self, actor_id: str, action: str) -> RateLimitDecision:
        """Like :meth:`admit` but raise :class:`RateLimitedError` on denial."""
        decision = self.admit(actor_id, action)
        if not decision.allowed:
            raise RateLimitedError(
                actor_id,
                action,
                retry_after=decision.retry_after(self._clock()),
            )
        return decision
