# src/liftcheck/models/user.py
"""SQLAlchemy model for user identities known to the validation service."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from liftcheck.db.session import Base
from liftcheck.db.time import utcnow


class User(Base):
    """Identity issued by the external auth provider plus its public profile.

    Only the fields needed to snapshot a submitter onto a share and the
    admin authorization flag live here; credentials stay with the provider.
    """

    __tablename__ = "user_account"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    gym: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Set only through the secret-guarded admin claims endpoint.
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
