# src/liftcheck/api/v1/endpoints/shares.py
"""Share submission, feed and share rate-limit endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy.exc import SQLAlchemyError

from liftcheck.core.errors import InternalError
from liftcheck.models import ShareStatus
from liftcheck.schemas.common import ErrorResponse, OkResponse
from liftcheck.schemas.share import ShareCreate, ShareRateLimitCheck, ShareRead, to_share_read
from liftcheck.services.shares import DEFAULT_FEED_LIMIT

from ..dependencies import ShareServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shares", tags=["shares"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/rate-limit", response_model=OkResponse, responses=_ERROR_RESPONSES)
def check_share_rate_limit(payload: ShareRateLimitCheck, service: ShareServiceDep) -> OkResponse:
    """Report whether the caller may still share today; nothing is counted."""
    try:
        service.check_share_quota(payload.user_id)
    except SQLAlchemyError as err:
        logger.error("Share rate-limit check for %s failed: %s", payload.user_id, err, exc_info=True)
        raise InternalError("Rate limit storage failure") from err
    return OkResponse()


@router.post(
    "",
    response_model=ShareRead,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
def submit_share(payload: ShareCreate, service: ShareServiceDep) -> ShareRead:
    """Submit a lift claim; it stays pending until peers validate it."""
    try:
        share = service.submit(
            user_id=payload.user_id,
            exercise=payload.exercise,
            weight=payload.weight,
            reps=payload.reps,
            sets=payload.sets,
            country=payload.country,
            gym=payload.gym,
            notes=payload.notes,
        )
    except SQLAlchemyError as err:
        logger.error("Share submission by %s failed: %s", payload.user_id, err, exc_info=True)
        raise InternalError("Share storage failure") from err
    return to_share_read(share)


@router.get("", response_model=list[ShareRead])
def list_shares(
    service: ShareServiceDep,
    share_status: Annotated[ShareStatus | None, Query(alias="status")] = None,
    gym: str | None = None,
    country: str | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_FEED_LIMIT,
) -> list[ShareRead]:
    """Return the newest shares, e.g. ``?status=pending`` for the validation queue."""
    shares = service.list_shares(status=share_status, gym=gym, country=country, limit=limit)
    return [to_share_read(share) for share in shares]


@router.get("/{share_id}", response_model=ShareRead, responses={404: {"model": ErrorResponse}})
def get_share(share_id: str, service: ShareServiceDep) -> ShareRead:
    """Return one share with its vote ledger."""
    return to_share_read(service.get_share(share_id))
