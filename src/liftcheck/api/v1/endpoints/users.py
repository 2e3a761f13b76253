# src/liftcheck/api/v1/endpoints/users.py
"""User profile endpoints."""

from fastapi import APIRouter

from liftcheck.schemas.common import ErrorResponse
from liftcheck.schemas.user import UserProfileUpdate, UserRead

from ..dependencies import UserServiceDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserRead, responses={404: {"model": ErrorResponse}})
def get_user(user_id: str, service: UserServiceDep) -> UserRead:
    """Return a user's public profile."""
    return UserRead.model_validate(service.get_user(user_id))


@router.put("/{user_id}", response_model=UserRead, responses={400: {"model": ErrorResponse}})
def update_profile(
    user_id: str,
    payload: UserProfileUpdate,
    service: UserServiceDep,
) -> UserRead:
    """Create or update the profile that new shares are snapshotted from."""
    user = service.upsert_profile(user_id, **payload.model_dump(exclude_unset=True))
    return UserRead.model_validate(user)
