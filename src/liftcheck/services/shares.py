"""Service-level helpers for submitting and reading shared lift claims."""

from __future__ import annotations

import logging
import math

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload, sessionmaker

from liftcheck.core.errors import ShareNotFoundError
from liftcheck.db.transaction import run_transaction
from liftcheck.models import SharedItem, ShareStatus, User
from liftcheck.services.rate_limiter import ACTION_SHARE, RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 20


def compute_score(weight: float, reps: int) -> int:
    """Estimate a one-rep max with the Epley formula, rounded half up.

    >>> compute_score(100, 5)
    117
    """
    return math.floor(weight * (1 + reps / 30) + 0.5)


class ShareService:
    """Create pending shares and serve the validation feed."""

    def __init__(self, session_factory: sessionmaker[Session], rate_limiter: RateLimiter) -> None:
        self._session_factory = session_factory
        self._rate_limiter = rate_limiter

    def check_share_quota(self, user_id: str) -> None:
        """Verify ``user_id`` may still share today without using up the allowance.

        Only :meth:`submit` counts against the daily window, so a client can
        check before every submission.

        Raises:
            RateLimitedError: If the window is exhausted.
        """
        self._rate_limiter.ensure_available(user_id, ACTION_SHARE)

    def submit(
        self,
        *,
        user_id: str,
        exercise: str,
        weight: float,
        reps: int,
        sets: int = 1,
        country: str | None = None,
        gym: str | None = None,
        notes: str | None = None,
    ) -> SharedItem:
        """Store a new pending share with an empty ledger.

        Display info is snapshotted from the submitter's profile; country and
        gym fall back to the profile when not given.

        Raises:
            RateLimitedError: If the submitter exhausted the share window.
        """
        self._rate_limiter.check(user_id, ACTION_SHARE)

        def _work(db: Session) -> SharedItem:
            profile = db.get(User, user_id)
            share = SharedItem(
                submitter_id=user_id,
                exercise=exercise,
                weight=weight,
                reps=reps,
                sets=sets,
                notes=notes,
                country=country or (profile.country if profile else None),
                gym=gym or (profile.gym if profile else None),
                username=profile.display_name if profile else None,
                avatar_url=profile.avatar_url if profile else None,
                computed_score=compute_score(weight, reps),
                status=ShareStatus.PENDING,
                total_votes=0,
                approve_votes=0,
                reject_votes=0,
                voters=[],
            )
            db.add(share)
            db.flush()
            return share

        share = run_transaction(self._session_factory, _work, label=f"share:{user_id}")
        logger.info(
            "Share %s submitted by %s: %s %.1fkg x %d (score %d)",
            share.id,
            user_id,
            exercise,
            weight,
            reps,
            share.computed_score,
        )
        return share

    def get_share(self, share_id: str) -> SharedItem:
        """Return one share with its voter set loaded.

        Raises:
            ShareNotFoundError: If the share does not exist.
        """
        with self._session_factory() as db:
            share = db.scalar(
                select(SharedItem)
                .options(selectinload(SharedItem.voters))
                .where(SharedItem.id == share_id)
            )
        if share is None:
            raise ShareNotFoundError(share_id)
        return share

    def list_shares(
        self,
        *,
        status: ShareStatus | None = None,
        gym: str | None = None,
        country: str | None = None,
        limit: int = DEFAULT_FEED_LIMIT,
    ) -> list[SharedItem]:
        """Return the newest shares, optionally filtered by status or scope tag."""
        stmt = select(SharedItem).options(selectinload(SharedItem.voters))
        if status is not None:
            stmt = stmt.where(SharedItem.status == status)
        if gym:
            stmt = stmt.where(SharedItem.gym == gym)
        if country:
            stmt = stmt.where(SharedItem.country == country)
        stmt = stmt.order_by(SharedItem.created_at.desc(), SharedItem.id).limit(limit)
        with self._session_factory() as db:
            return list(db.scalars(stmt))
