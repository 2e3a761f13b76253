# src/liftcheck/services/__init__.py
"""Business logic services for the LiftCheck service."""

from .leaderboard_worker import LeaderboardWorker
from .rankings import RankingMaterializer, RebuildReport, scopes_for
from .rate_limiter import RateLimiter, RateLimitPolicy
from .shares import ShareService, compute_score
from .users import UserService
from .validation import ValidationPolicy, ValidationService, decide_status
from .vote_submission import VoteSubmissionService
from .votes import VoteLedgerService, VoteOutcome

__all__ = [
    "LeaderboardWorker",
    "RankingMaterializer",
    "RateLimitPolicy",
    "RateLimiter",
    "RebuildReport",
    "ShareService",
    "UserService",
    "ValidationPolicy",
    "ValidationService",
    "VoteLedgerService",
    "VoteOutcome",
    "VoteSubmissionService",
    "compute_score",
    "decide_status",
    "scopes_for",
]
