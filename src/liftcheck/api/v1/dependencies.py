"""Shared API dependencies for service wiring and admin authorization."""

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session, sessionmaker

from liftcheck.core.errors import UnauthorizedError
from liftcheck.core.settings import settings
from liftcheck.db.session import get_db, get_session_factory
from liftcheck.services.rankings import RankingMaterializer
from liftcheck.services.rate_limiter import RateLimiter
from liftcheck.services.shares import ShareService
from liftcheck.services.users import UserService
from liftcheck.services.validation import ValidationService
from liftcheck.services.vote_submission import VoteSubmissionService
from liftcheck.services.votes import VoteLedgerService

logger = logging.getLogger(__name__)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]


def get_rate_limiter(session_factory: SessionFactoryDep) -> RateLimiter:
    """Return a rate limiter bound to the shared counter store."""
    return RateLimiter(session_factory)


def get_ranking_materializer(session_factory: SessionFactoryDep) -> RankingMaterializer:
    """Return the ranking materializer."""
    return RankingMaterializer(session_factory)


RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
MaterializerDep = Annotated[RankingMaterializer, Depends(get_ranking_materializer)]


def get_vote_submission_service(
    session_factory: SessionFactoryDep,
    rate_limiter: RateLimiterDep,
    materializer: MaterializerDep,
) -> VoteSubmissionService:
    """Return the vote flow composed from its three collaborators."""
    return VoteSubmissionService(
        rate_limiter=rate_limiter,
        ledger=VoteLedgerService(session_factory),
        validation=ValidationService(session_factory, materializer),
    )


def get_share_service(
    session_factory: SessionFactoryDep,
    rate_limiter: RateLimiterDep,
) -> ShareService:
    """Return the share submission and feed service."""
    return ShareService(session_factory, rate_limiter)


def get_user_service(session_factory: SessionFactoryDep) -> UserService:
    """Return the user profile service."""
    return UserService(session_factory)


def require_admin_secret(
    x_admin_secret: Annotated[str | None, Header(alias="X-Admin-Secret")] = None,
) -> None:
    """Reject the request unless it carries the configured admin secret.

    Raises:
        UnauthorizedError: If the secret is missing, wrong, or not configured.
    """
    expected = settings.admin_api_secret
    if not expected or x_admin_secret is None:
        raise UnauthorizedError("Missing admin secret")
    if not hmac.compare_digest(x_admin_secret.encode(), expected.encode()):
        logger.warning("Rejected admin request with an incorrect secret")
        raise UnauthorizedError("Incorrect admin secret")


VoteSubmissionDep = Annotated[VoteSubmissionService, Depends(get_vote_submission_service)]
ShareServiceDep = Annotated[ShareService, Depends(get_share_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AdminDep = Depends(require_admin_secret)
