"""Pydantic schemas for the LiftCheck API."""

from .common import ErrorResponse, OkResponse
from .ranking import LeaderboardRead, LeaderboardRow, RebuildReportRead
from .share import ShareCreate, ShareRateLimitCheck, ShareRead, VoteLedgerRead
from .user import AdminClaimUpdate, AdminMetrics, UserProfileUpdate, UserRead
from .vote import VoteCreate

__all__ = [
    "AdminClaimUpdate", "AdminMetrics",
    "ErrorResponse", "OkResponse",
    "LeaderboardRead", "LeaderboardRow", "RebuildReportRead",
    "ShareCreate", "ShareRateLimitCheck", "ShareRead", "VoteLedgerRead",
    "UserProfileUpdate", "UserRead",
    "VoteCreate",
]
