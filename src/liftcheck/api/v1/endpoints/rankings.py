# src/liftcheck/api/v1/endpoints/rankings.py
"""Read-only leaderboard endpoints."""

from fastapi import APIRouter

from liftcheck.schemas.common import ErrorResponse
from liftcheck.schemas.ranking import LeaderboardRead

from ..dependencies import MaterializerDep

router = APIRouter(prefix="/rankings", tags=["rankings"])


@router.get(
    "/{scope_key}",
    response_model=LeaderboardRead,
    responses={404: {"model": ErrorResponse}},
)
def get_leaderboard(scope_key: str, materializer: MaterializerDep) -> LeaderboardRead:
    """Return the materialized leaderboard for a scope key such as ``global_bench``.

    Boards are rebuilt on a schedule, so a freshly approved share may take one
    refresh interval to appear.
    """
    return LeaderboardRead.model_validate(materializer.get_leaderboard(scope_key))
