"""Leaderboard schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LeaderboardRow(BaseModel):
    """One ranked entry on a materialized leaderboard."""

    rank: int = Field(..., ge=1)
    share_id: str
    user_id: str
    username: str
    avatar_url: str | None = None
    weight: float
    reps: int
    computed_score: int
    gym: str | None = None
    country: str | None = None
    record_date: datetime


class LeaderboardRead(BaseModel):
    """Materialized Top-N board for one scope."""

    model_config = ConfigDict(from_attributes=True)

    scope_key: str
    scope_kind: str
    scope_value: str | None
    exercise: str
    entries: list[LeaderboardRow]
    last_updated: datetime | None


class RebuildReportRead(BaseModel):
    """Outcome of an on-demand leaderboard rebuild."""

    model_config = ConfigDict(from_attributes=True)

    ok: bool
    rebuilt: list[str]
    failed: dict[str, str]
