# src/liftcheck/models/ranking.py
"""Models for scoped ranking entries and their materialized leaderboards."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from liftcheck.db.session import Base

SCOPE_GLOBAL = "global"
SCOPE_COUNTRY = "country"
SCOPE_GYM = "gym"


class RankingEntry(Base):
    """Append-only projection of one approved share into one ranking scope.

    Keyed by ``(scope_key, share_id)`` so re-ingesting a share overwrites its
    row in place instead of adding a duplicate.
    """

    __tablename__ = "ranking_entry"
    __table_args__ = (Index("ix_ranking_entry_share_id", "share_id"),)

    scope_key: Mapped[str] = mapped_column(String(320), primary_key=True)
    share_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("shared_item.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # global / country / gym; scope_value is null for global.
    scope_kind: Mapped[str] = mapped_column(String(16), nullable=False)
    scope_value: Mapped[str | None] = mapped_column(String(128), nullable=True)
    exercise: Mapped[str] = mapped_column(String(128), nullable=False)

    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    weight: Mapped[float] = mapped_column(Float, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    computed_score: Mapped[int] = mapped_column(Integer, nullable=False)
    gym: Mapped[str | None] = mapped_column(String(128), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    record_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Leaderboard(Base):
    """Materialized Top-N view for one scope, rebuilt wholesale on a schedule."""

    __tablename__ = "leaderboard"

    scope_key: Mapped[str] = mapped_column(String(320), primary_key=True)
    scope_kind: Mapped[str] = mapped_column(String(16), nullable=False)
    scope_value: Mapped[str | None] = mapped_column(String(128), nullable=True)
    exercise: Mapped[str] = mapped_column(String(128), nullable=False)

    # Ranked rows as plain JSON; empty until the first rebuild.
    entries: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
