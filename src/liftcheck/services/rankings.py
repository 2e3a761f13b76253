"""Ranking fan-out for approved shares and periodic leaderboard rebuilds."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from liftcheck.core.errors import NotFoundError
from liftcheck.core.settings import settings
from liftcheck.db.time import as_utc, utcnow
from liftcheck.db.transaction import run_transaction
from liftcheck.models import Leaderboard, RankingEntry, SharedItem, ShareStatus
from liftcheck.models.ranking import SCOPE_COUNTRY, SCOPE_GLOBAL, SCOPE_GYM

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "User"


@dataclass(frozen=True)
class RankingScope:
    """One leaderboard partition: ``kind`` + optional ``value`` + exercise."""

    kind: str
    exercise: str
    value: str | None = None

    @property
    def key(self) -> str:
        if self.value is None:
            return f"{self.kind}_{self.exercise}"
        return f"{self.kind}_{self.value}_{self.exercise}"


def scopes_for(share: SharedItem) -> list[RankingScope]:
    """Return every scope an approved share belongs to.

    Global always applies; country and gym only when the share carries them.
    """
    scopes = [RankingScope(SCOPE_GLOBAL, share.exercise)]
    if share.country:
        scopes.append(RankingScope(SCOPE_COUNTRY, share.exercise, share.country))
    if share.gym:
        scopes.append(RankingScope(SCOPE_GYM, share.exercise, share.gym))
    return scopes


def rank_entries(entries: Iterable[RankingEntry], size: int) -> list[dict[str, object]]:
    """Order entries best-first and return the top ``size`` as ranked rows.

    Ties on score go to the earlier record date, then to the lower share id,
    so a rebuild is deterministic regardless of scan order.
    """
    ordered = sorted(
        entries,
        key=lambda entry: (-entry.computed_score, as_utc(entry.record_date), entry.share_id),
    )
    return [
        {
            "rank": position,
            "share_id": entry.share_id,
            "user_id": entry.user_id,
            "username": entry.username,
            "avatar_url": entry.avatar_url,
            "weight": entry.weight,
            "reps": entry.reps,
            "computed_score": entry.computed_score,
            "gym": entry.gym,
            "country": entry.country,
            "record_date": as_utc(entry.record_date).isoformat(),
        }
        for position, entry in enumerate(ordered[:size], start=1)
    ]


@dataclass
class RebuildReport:
    """Per-scope outcome of a leaderboard rebuild run."""

    rebuilt: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class RankingMaterializer:
    """Write approved shares into scoped rankings and rebuild Top-N boards."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        size: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._size = size if size is not None else settings.leaderboard_size
        self._clock = clock

    # --- Ingestion ------------------------------------------------------------------
    def ingest(self, db: Session, share: SharedItem) -> list[str]:
        """Upsert one ranking entry per applicable scope inside ``db``'s transaction.

        Safe to repeat: entries are keyed by ``(scope_key, share_id)``.

        Returns:
            The scope keys written.
        """
        record_date = share.finalized_at or self._clock()
        written: list[str] = []
        for scope in scopes_for(share):
            if db.get(Leaderboard, scope.key) is None:
                db.add(
                    Leaderboard(
                        scope_key=scope.key,
                        scope_kind=scope.kind,
                        scope_value=scope.value,
                        exercise=scope.exercise,
                        entries=[],
                    )
                )
            db.merge(
                RankingEntry(
                    scope_key=scope.key,
                    share_id=share.id,
                    scope_kind=scope.kind,
                    scope_value=scope.value,
                    exercise=share.exercise,
                    user_id=share.submitter_id,
                    username=share.username or DEFAULT_USERNAME,
                    avatar_url=share.avatar_url,
                    weight=share.weight,
                    reps=share.reps,
                    computed_score=share.computed_score,
                    gym=share.gym,
                    country=share.country,
                    record_date=record_date,
                )
            )
            written.append(scope.key)
        db.flush()
        logger.info("Ingested share %s into %d ranking scopes", share.id, len(written))
        return written

    def ingest_share(self, share_id: str) -> list[str]:
        """Ingest an already approved share in its own transaction.

        Shares that are not approved are left alone and yield no scopes.
        """

        def _work(db: Session) -> list[str]:
            share = db.get(SharedItem, share_id)
            if share is None:
                raise NotFoundError(f"Share {share_id!r} not found")
            if share.status is not ShareStatus.APPROVED:
                return []
            return self.ingest(db, share)

        return run_transaction(self._session_factory, _work, label=f"ingest:{share_id}")

    # --- Leaderboards ---------------------------------------------------------------
    def rebuild_all(self) -> RebuildReport:
        """Recompute every scope's Top-N board from a snapshot of raw entries.

        Each scope is written in its own transaction and failures are
        collected, so one bad scope never blocks the others. Entries
        ingested during the scan show up on the next run.
        """
        with self._session_factory() as db:
            snapshot = list(db.scalars(select(RankingEntry)))

        grouped: dict[str, list[RankingEntry]] = defaultdict(list)
        for entry in snapshot:
            grouped[entry.scope_key].append(entry)

        report = RebuildReport()
        for scope_key in sorted(grouped):
            entries = grouped[scope_key]
            try:
                self._write_leaderboard(scope_key, entries)
            except Exception as exc:  # noqa: BLE001
                logger.error("Leaderboard rebuild failed for scope %s: %s", scope_key, exc, exc_info=True)
                report.failed[scope_key] = exc.__class__.__name__
                continue
            report.rebuilt.append(scope_key)

        logger.info(
            "Leaderboard rebuild finished: %d scopes rebuilt, %d failed (%d entries scanned)",
            len(report.rebuilt),
            len(report.failed),
            len(snapshot),
        )
        return report

    def _write_leaderboard(self, scope_key: str, entries: Sequence[RankingEntry]) -> None:
        rows = rank_entries(entries, self._size)
        sample = entries[0]

        def _work(db: Session) -> None:
            board = db.get(Leaderboard, scope_key)
            if board is None:
                board = Leaderboard(
                    scope_key=scope_key,
                    scope_kind=sample.scope_kind,
                    scope_value=sample.scope_value,
                    exercise=sample.exercise,
                )
                db.add(board)
            board.entries = rows
            board.last_updated = self._clock()

        run_transaction(self._session_factory, _work, label=f"leaderboard:{scope_key}")

    def get_leaderboard(self, scope_key: str) -> Leaderboard:
        """Return the materialized board for ``scope_key``.

        Raises:
            NotFoundError: If no share was ever ingested into the scope.
        """
        with self._session_factory() as db:
            board = db.get(Leaderboard, scope_key)
        if board is None:
            raise NotFoundError(f"Leaderboard {scope_key!r} not found")
        return board
