"""User and admin schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from liftcheck.schemas.common import CountryTag, GymTag, Identifier


class UserProfileUpdate(BaseModel):
    """Profile fields a user may set; omitted fields are left unchanged."""

    display_name: str | None = Field(None, max_length=80)
    avatar_url: str | None = Field(None, max_length=2048)
    country: CountryTag | None = None
    gym: GymTag | None = None


class UserRead(BaseModel):
    """Public user profile."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str | None
    avatar_url: str | None
    country: str | None
    gym: str | None
    is_admin: bool


class AdminClaimUpdate(BaseModel):
    """Admin claim assignment payload."""

    uid: Identifier
    admin: StrictBool


class AdminMetricsTotals(BaseModel):
    users: int
    shared_items: int
    ranking_entries: int
    leaderboards: int


class AdminMetrics(BaseModel):
    """Aggregate counters for the admin dashboard."""

    updated_at: datetime
    totals: AdminMetricsTotals
    shared_items_by_status: dict[str, int]
