# src/liftcheck/models/share.py
"""Models for shared lift claims and the votes cast on them."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftcheck.db.session import Base
from liftcheck.db.time import utcnow


class ShareStatus(str, enum.Enum):
    """Validation lifecycle of a share: pending until finalized, then terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def _new_share_id() -> str:
    return uuid.uuid4().hex


class SharedItem(Base):
    """A user-submitted lift claim awaiting (or past) community validation.

    The vote ledger is embedded as three counters plus the ``voters``
    relationship; all four change together inside one versioned transaction.
    """

    __tablename__ = "shared_item"
    __table_args__ = (
        CheckConstraint(
            "total_votes = approve_votes + reject_votes",
            name="ck_shared_item_vote_totals",
        ),
        CheckConstraint("approve_votes >= 0 AND reject_votes >= 0", name="ck_shared_item_votes"),
        Index("ix_shared_item_status_created", "status", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_share_id)
    submitter_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    exercise: Mapped[str] = mapped_column(String(128), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    sets: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Scope tags used to fan approved shares out into leaderboards.
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    gym: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Submitter display snapshot taken at share time.
    username: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Estimated one-rep max, fixed at submission.
    computed_score: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[ShareStatus] = mapped_column(
        Enum(
            ShareStatus,
            name="share_status",
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=ShareStatus.PENDING,
    )

    total_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    approve_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reject_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Bumped on every UPDATE; a stale writer fails instead of overwriting counts.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    voters: Mapped[list[ShareVoter]] = relationship(
        "ShareVoter",
        back_populates="share",
        cascade="all, delete-orphan",
        order_by="ShareVoter.voter_id",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def approval_ratio(self) -> float:
        """Fraction of approve votes among all votes, 0.0 before the first vote."""
        if not self.total_votes:
            return 0.0
        return self.approve_votes / self.total_votes


class ShareVoter(Base):
    """Membership row in a share's voter set.

    The composite primary key keeps a voter from appearing twice even if two
    transactions race past the in-transaction check.
    """

    __tablename__ = "share_voter"

    share_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("shared_item.id", ondelete="CASCADE"),
        primary_key=True,
    )
    voter_id: Mapped[str] = mapped_column(String(128), primary_key=True)

    # True = approve, False = reject.
    approve: Mapped[bool] = mapped_column(Boolean, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    share: Mapped[SharedItem] = relationship("SharedItem", back_populates="voters")
