"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .rankings import router as rankings_router
from .shares import router as shares_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "admin_router",
    "rankings_router",
    "shares_router",
    "users_router",
    "votes_router",
]
