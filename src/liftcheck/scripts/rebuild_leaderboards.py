"""Rebuild every leaderboard once, for cron-driven deployments."""
from __future__ import annotations

import argparse
import logging
import sys

from liftcheck.core.settings import settings
from liftcheck.db.session import build_engine, build_session_factory
from liftcheck.services.rankings import RankingMaterializer


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Recompute Top-N leaderboards from ranking entries")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to DATABASE_URL)",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=None,
        help="Entries kept per leaderboard (defaults to LEADERBOARD_SIZE)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())
    engine = build_engine(args.url or settings.database_url)
    try:
        materializer = RankingMaterializer(build_session_factory(engine), size=args.size)
        report = materializer.rebuild_all()
    finally:
        engine.dispose()

    print(f"[leaderboards] rebuilt {len(report.rebuilt)} scopes, {len(report.failed)} failed")
    for scope_key, reason in sorted(report.failed.items()):
        print(f"[leaderboards] FAILED {scope_key}: {reason}", file=sys.stderr)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
