"""Background leaderboard materialization.

This module provides the LeaderboardWorker class which periodically rebuilds
every scope's Top-N leaderboard from the raw ranking entries. It runs inside
the application's event loop and hands the blocking database work to a
thread.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from liftcheck.core.settings import settings
from liftcheck.db.time import utcnow
from liftcheck.services.rankings import RankingMaterializer, RebuildReport

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass
class LeaderboardWorkerState:
    """Bookkeeping about the most recent rebuild run."""

    runs: int = 0
    last_run_at: datetime | None = None
    last_report: RebuildReport | None = None


class LeaderboardWorker:
    """Rebuilds leaderboards on a fixed interval until stopped.

    The first rebuild happens right after start; later ones follow every
    ``interval`` seconds. A failed run is logged and the loop carries on.
    """

    def __init__(self, materializer: RankingMaterializer, interval: float | None = None) -> None:
        """Initialize the worker.

        Args:
            materializer: Materializer whose ``rebuild_all`` is invoked each cycle.
            interval: Seconds between runs. If None, uses settings.
        """
        self.materializer = materializer
        self.interval = max(
            0.01,
            float(interval if interval is not None else settings.leaderboard_refresh_seconds),
        )
        self.state = LeaderboardWorkerState()
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background rebuild loop."""

        if not self.running:
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background rebuild loop."""

        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def run_once(self) -> RebuildReport:
        """Run a single rebuild off the event loop."""
        report = await asyncio.to_thread(self.materializer.rebuild_all)
        self.state.runs += 1
        self.state.last_run_at = utcnow()
        self.state.last_report = report
        if report.failed:
            logger.warning(
                "Leaderboard rebuild left %d scopes stale: %s",
                len(report.failed),
                ", ".join(sorted(report.failed)),
            )
        return report

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await self.run_once()
            except SQLAlchemyError as e:
                logger.error("LeaderboardWorker could not read ranking entries: %s", e, exc_info=True)
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.error(
                    "LeaderboardWorker encountered data processing error: %s", e, exc_info=True
                )

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except TimeoutError:
                continue
