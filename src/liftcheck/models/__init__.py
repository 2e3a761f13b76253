# src/liftcheck/models/__init__.py
"""SQLAlchemy models for the LiftCheck service."""

from .rate_limit import RateLimitCounter
from .ranking import Leaderboard, RankingEntry
from .share import SharedItem, ShareStatus, ShareVoter
from .user import User

__all__ = [
    "Leaderboard", "RankingEntry",
    "RateLimitCounter",
    "SharedItem", "ShareStatus", "ShareVoter",
    "User",
]
