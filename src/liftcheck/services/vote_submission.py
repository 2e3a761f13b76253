"""Vote submission flow: rate limit, ledger update, then finalization."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from liftcheck.services.rate_limiter import ACTION_VOTE, RateLimiter
from liftcheck.services.validation import FinalizeResult, ValidationService
from liftcheck.services.votes import VoteLedgerService, VoteOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteReceipt:
    """What happened to a submitted vote, for logging and tests."""

    outcome: VoteOutcome
    finalize: FinalizeResult


class VoteSubmissionService:
    """Compose the rate limiter, vote ledger and state machine for one request."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        ledger: VoteLedgerService,
        validation: ValidationService,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._ledger = ledger
        self._validation = validation

    def submit(self, share_id: str, voter_id: str, approve: bool) -> VoteReceipt:
        """Submit one vote; duplicates and late votes are successful no-ops.

        Finalization runs after every accepted request, not only after
        recorded votes, so a share whose earlier finalization attempt failed
        converges on the next retry.

        Raises:
            RateLimitedError: If the voter exhausted the hourly window.
            ShareNotFoundError: If the share does not exist.
            TransactionConflictError: If a transaction kept conflicting.
        """
        self._rate_limiter.check(voter_id, ACTION_VOTE)
        outcome = self._ledger.cast_vote(share_id, voter_id, approve)
        finalize = self._validation.try_finalize(share_id)
        if not outcome.changed_ledger:
            logger.info("Vote on share %s by %s ignored: %s", share_id, voter_id, outcome.value)
        return VoteReceipt(outcome=outcome, finalize=finalize)
