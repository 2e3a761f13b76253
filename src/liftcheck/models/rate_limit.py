# src/liftcheck/models/rate_limit.py
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from liftcheck.db.session import Base


class RateLimitCounter(Base):
    __tablename__ = "rate_limit_counter"
    __table_args__ = (CheckConstraint("count >= 0", name="ck_rate_limit_counter_count"),)

    # (actor_id, action) -> current fixed window. Created lazily, expires by rollover.
    actor_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    action: Mapped[str] = mapped_column(String(32), primary_key=True)
    window_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
