"""Vote ledger operations for shared lift claims."""

from __future__ import annotations

import enum
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from liftcheck.core.errors import ShareNotFoundError
from liftcheck.core.settings import settings
from liftcheck.db.transaction import run_transaction
from liftcheck.models import SharedItem, ShareStatus, ShareVoter

logger = logging.getLogger(__name__)


class VoteOutcome(str, enum.Enum):
    """Result of a vote attempt; only RECORDED changes the ledger."""

    RECORDED = "recorded"
    ALREADY_VOTED = "already_voted"
    ALREADY_FINALIZED = "already_finalized"
    SELF_VOTE = "self_vote"

    @property
    def changed_ledger(self) -> bool:
        return self is VoteOutcome.RECORDED


class VoteLedgerService:
    """Apply at most one vote per voter to a share's embedded ledger."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        prevent_self_vote: bool | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._prevent_self_vote = (
            settings.prevent_self_vote if prevent_self_vote is None else prevent_self_vote
        )

    def cast_vote(self, share_id: str, voter_id: str, approve: bool) -> VoteOutcome:
        """Record ``voter_id``'s vote on ``share_id`` exactly once.

        Runs as a single versioned read-modify-write on the share; a
        concurrent writer forces a retry that re-reads the voter set, so
        counts are never lost and never double-applied.

        Raises:
            ShareNotFoundError: If the share does not exist.
            TransactionConflictError: If retries were exhausted.
        """

        def _work(db: Session) -> VoteOutcome:
            share = db.get(SharedItem, share_id)
            if share is None:
                raise ShareNotFoundError(share_id)

            if share.status is not ShareStatus.PENDING:
                return VoteOutcome.ALREADY_FINALIZED

            if self._prevent_self_vote and share.submitter_id == voter_id:
                return VoteOutcome.SELF_VOTE

            already = db.scalar(
                select(ShareVoter.voter_id).where(
                    ShareVoter.share_id == share_id,
                    ShareVoter.voter_id == voter_id,
                )
            )
            if already is not None:
                return VoteOutcome.ALREADY_VOTED

            db.add(ShareVoter(share_id=share_id, voter_id=voter_id, approve=approve))
            share.total_votes += 1
            if approve:
                share.approve_votes += 1
            else:
                share.reject_votes += 1
            db.flush()
            return VoteOutcome.RECORDED

        outcome = run_transaction(self._session_factory, _work, label=f"cast_vote:{share_id}")
        logger.debug("Vote on share %s by %s: %s", share_id, voter_id, outcome.value)
        return outcome
