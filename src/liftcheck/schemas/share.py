"""Pydantic schemas for shared lift claims."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from liftcheck.models import SharedItem, ShareStatus
from liftcheck.schemas.common import CountryTag, ExerciseName, GymTag, Identifier


class ShareRateLimitCheck(BaseModel):
    """Payload for the standalone share rate-limit check."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Identifier = Field(..., alias="userId")


class ShareCreate(BaseModel):
    """Payload for submitting a lift claim for community validation."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Identifier = Field(..., alias="userId")
    exercise: ExerciseName
    weight: float = Field(..., gt=0, le=1000, description="Load in kilograms.")
    reps: int = Field(..., ge=1, le=100)
    sets: int = Field(1, ge=1, le=100)
    country: CountryTag | None = None
    gym: GymTag | None = None
    notes: str | None = Field(None, max_length=2000)


class VoteLedgerRead(BaseModel):
    """Vote counts and voter set embedded in a share."""

    total_votes: int
    approve_votes: int
    reject_votes: int
    approval_ratio: float
    voters: list[str]


class ShareRead(BaseModel):
    """Public view of a share and its validation state."""

    id: str
    submitter_id: str
    username: str | None
    avatar_url: str | None
    exercise: str
    weight: float
    reps: int
    sets: int
    computed_score: int
    country: str | None
    gym: str | None
    notes: str | None
    status: ShareStatus
    created_at: datetime
    finalized_at: datetime | None
    ledger: VoteLedgerRead


def to_share_read(share: SharedItem) -> ShareRead:
    """Convert a SharedItem ORM instance (voters loaded) to an API schema."""
    return ShareRead(
        id=share.id,
        submitter_id=share.submitter_id,
        username=share.username,
        avatar_url=share.avatar_url,
        exercise=share.exercise,
        weight=share.weight,
        reps=share.reps,
        sets=share.sets,
        computed_score=share.computed_score,
        country=share.country,
        gym=share.gym,
        notes=share.notes,
        status=share.status,
        created_at=share.created_at,
        finalized_at=share.finalized_at,
        ledger=VoteLedgerRead(
            total_votes=share.total_votes,
            approve_votes=share.approve_votes,
            reject_votes=share.reject_votes,
            approval_ratio=share.approval_ratio,
            voters=[voter.voter_id for voter in share.voters],
        ),
    )
