# src/liftcheck/api/v1/endpoints/admin.py
"""Admin endpoints guarded by the out-of-band shared secret."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter

from liftcheck.schemas.common import ErrorResponse, OkResponse
from liftcheck.schemas.ranking import RebuildReportRead
from liftcheck.schemas.user import AdminClaimUpdate, AdminMetrics
from liftcheck.services.metrics import collect_admin_metrics

from ..dependencies import AdminDep, MaterializerDep, SessionDep, UserServiceDep

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[AdminDep],
    responses={401: {"model": ErrorResponse}},
)


@router.post("/claims", response_model=OkResponse, responses={400: {"model": ErrorResponse}})
def set_admin_claim(payload: AdminClaimUpdate, service: UserServiceDep) -> OkResponse:
    """Grant or revoke the admin flag on a user identity."""
    service.set_admin_claim(payload.uid, payload.admin)
    return OkResponse()


@router.get("/metrics", response_model=AdminMetrics)
def get_metrics(db: SessionDep) -> AdminMetrics:
    """Return user, share and ranking totals."""
    return AdminMetrics.model_validate(collect_admin_metrics(db))


@router.post("/leaderboards/rebuild", response_model=RebuildReportRead)
async def rebuild_leaderboards(materializer: MaterializerDep) -> RebuildReportRead:
    """Rebuild every leaderboard now instead of waiting for the next cycle."""
    report = await asyncio.to_thread(materializer.rebuild_all)
    return RebuildReportRead.model_validate(report)
