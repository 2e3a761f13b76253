"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    rankings_router,
    shares_router,
    users_router,
    votes_router,
)

__all__ = [
    "admin_router",
    "rankings_router",
    "shares_router",
    "users_router",
    "votes_router",
]
