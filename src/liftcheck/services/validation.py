"""Validation state machine for shared lift claims.

A share stays ``pending`` until it has collected a quorum of votes, then
moves once, irreversibly, to ``approved`` or ``rejected`` depending on the
share of approve votes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from fractions import Fraction

from sqlalchemy.orm import Session, sessionmaker

from liftcheck.core.errors import ShareNotFoundError
from liftcheck.core.settings import Settings, settings
from liftcheck.db.time import utcnow
from liftcheck.db.transaction import run_transaction
from liftcheck.models import SharedItem, ShareStatus
from liftcheck.services.rankings import RankingMaterializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationPolicy:
    """Quorum and approval ratio needed to finalize a share."""

    quorum: int = 5
    approval_ratio: float = 0.6

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> ValidationPolicy:
        config = config or settings
        return cls(quorum=config.validation_quorum, approval_ratio=config.validation_approval_ratio)


@dataclass(frozen=True)
class FinalizeResult:
    """Status after a finalization attempt and whether this call made the move."""

    share_id: str
    status: ShareStatus
    transitioned: bool
    scopes: tuple[str, ...] = ()


def decide_status(total_votes: int, approve_votes: int, policy: ValidationPolicy) -> ShareStatus:
    """Return the status a ledger with these counts should be in.

    The ratio is compared exactly, so 3 of 5 meets a 0.6 threshold.
    """
    if total_votes < policy.quorum or total_votes <= 0:
        return ShareStatus.PENDING
    threshold = Fraction(str(policy.approval_ratio))
    if Fraction(approve_votes, total_votes) >= threshold:
        return ShareStatus.APPROVED
    return ShareStatus.REJECTED


class ValidationService:
    """Finalize shares whose ledger reached quorum; safe to call any number of times."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        materializer: RankingMaterializer,
        *,
        policy: ValidationPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._materializer = materializer
        self._policy = policy or ValidationPolicy.from_settings()
        self._clock = clock

    @property
    def policy(self) -> ValidationPolicy:
        return self._policy

    def try_finalize(self, share_id: str) -> FinalizeResult:
        """Apply the pending -> approved/rejected transition if it is due.

        The pending precondition is checked in the same versioned transaction
        that reads the counts, so concurrent callers converge on one
        transition. Approval ingests the share into its ranking scopes in
        that same transaction.

        Raises:
            ShareNotFoundError: If the share does not exist.
        """

        def _work(db: Session) -> FinalizeResult:
            share = db.get(SharedItem, share_id)
            if share is None:
                raise ShareNotFoundError(share_id)

            if share.status is not ShareStatus.PENDING:
                return FinalizeResult(share_id, share.status, transitioned=False)

            new_status = decide_status(share.total_votes, share.approve_votes, self._policy)
            if new_status is ShareStatus.PENDING:
                return FinalizeResult(share_id, new_status, transitioned=False)

            share.status = new_status
            share.finalized_at = self._clock()
            db.flush()

            scopes: list[str] = []
            if new_status is ShareStatus.APPROVED:
                scopes = self._materializer.ingest(db, share)
            return FinalizeResult(share_id, new_status, transitioned=True, scopes=tuple(scopes))

        result = run_transaction(self._session_factory, _work, label=f"finalize:{share_id}")
        if result.transitioned:
            logger.info(
                "Share %s finalized as %s (quorum=%d, ratio=%.2f)",
                share_id,
                result.status.value,
                self._policy.quorum,
                self._policy.approval_ratio,
            )
        return result
