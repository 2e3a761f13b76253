"""Admin metrics aggregation."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from liftcheck.db.time import utcnow
from liftcheck.models import Leaderboard, RankingEntry, SharedItem, ShareStatus, User


def collect_admin_metrics(db: Session) -> dict[str, object]:
    """Return totals for the admin dashboard, computed on demand."""
    by_status = {status.value: 0 for status in ShareStatus}
    rows = db.execute(
        select(SharedItem.status, func.count()).group_by(SharedItem.status)
    ).all()
    for status, count in rows:
        by_status[ShareStatus(status).value] = int(count)

    return {
        "updated_at": utcnow(),
        "totals": {
            "users": db.scalar(select(func.count()).select_from(User)) or 0,
            "shared_items": sum(by_status.values()),
            "ranking_entries": db.scalar(select(func.count()).select_from(RankingEntry)) or 0,
            "leaderboards": db.scalar(select(func.count()).select_from(Leaderboard)) or 0,
        },
        "shared_items_by_status": by_status,
    }
