"""Helpers for user profiles and admin claims."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session, sessionmaker

from liftcheck.core.errors import NotFoundError
from liftcheck.db.transaction import run_transaction
from liftcheck.models import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("display_name", "avatar_url", "country", "gym")


class UserService:
    """Thin wrapper around user identity records."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_user(self, user_id: str) -> User:
        with self._session_factory() as db:
            user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id!r} not found")
        return user

    def upsert_profile(self, user_id: str, **fields: str | None) -> User:
        """Create or update the public profile shares are snapshotted from.

        Only keys in :data:`PROFILE_FIELDS` are applied; the admin flag is
        never touched here.
        """
        updates = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}

        def _work(db: Session) -> User:
            user = db.get(User, user_id)
            if user is None:
                user = User(user_id=user_id, is_admin=False)
                db.add(user)
            for key, value in updates.items():
                setattr(user, key, value)
            db.flush()
            return user

        return run_transaction(self._session_factory, _work, label=f"profile:{user_id}")

    def set_admin_claim(self, user_id: str, admin: bool) -> User:
        """Set the admin authorization flag, creating the identity if needed."""

        def _work(db: Session) -> User:
            user = db.get(User, user_id)
            if user is None:
                user = User(user_id=user_id)
                db.add(user)
            user.is_admin = admin
            db.flush()
            return user

        user = run_transaction(self._session_factory, _work, label=f"admin_claim:{user_id}")
        logger.info("Admin claim for %s set to %s", user_id, admin)
        return user
