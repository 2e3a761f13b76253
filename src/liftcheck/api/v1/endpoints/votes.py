# src/liftcheck/api/v1/endpoints/votes.py
"""Vote submission endpoint for peer validation."""

import logging

from fastapi import APIRouter, status
from sqlalchemy.exc import SQLAlchemyError

from liftcheck.core.errors import InternalError
from liftcheck.schemas.common import ErrorResponse, OkResponse
from liftcheck.schemas.vote import VoteCreate

from ..dependencies import VoteSubmissionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post(
    "",
    response_model=OkResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def cast_vote(vote_data: VoteCreate, service: VoteSubmissionDep) -> OkResponse:
    """Cast an approve/reject vote on a pending share.

    Repeated votes and votes on finalized shares succeed without effect, so
    clients can retry freely.
    """
    try:
        receipt = service.submit(vote_data.share_id, vote_data.voter_id, vote_data.approve)
    except SQLAlchemyError as err:
        logger.error(
            "Vote on share %s by %s failed in the store: %s",
            vote_data.share_id,
            vote_data.voter_id,
            err,
            exc_info=True,
        )
        raise InternalError("Vote storage failure") from err

    logger.debug(
        "Vote on share %s by %s -> %s (status %s)",
        vote_data.share_id,
        vote_data.voter_id,
        receipt.outcome.value,
        receipt.finalize.status.value,
    )
    return OkResponse()
