# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LEADERBOARD_WORKER_ENABLED", "false")
os.environ.setdefault("ADMIN_API_SECRET", "test-admin-secret")
os.environ.setdefault("TRANSACTION_BACKOFF_SECONDS", "0")

from liftcheck.db.session import Base, build_session_factory  # noqa: E402
from liftcheck.db.session import get_db as app_get_db  # noqa: E402
from liftcheck.db.session import get_session_factory as app_get_session_factory  # noqa: E402
from liftcheck.main import app as fastapi_app  # noqa: E402
from liftcheck.models import SharedItem, ShareStatus, User  # noqa: E402
from liftcheck.services.shares import compute_score  # noqa: E402

ADMIN_SECRET = os.environ["ADMIN_API_SECRET"]

_SHARE_COUNTER = count(1)


class FakeClock:
    """Manually advanced UTC clock for window and ordering tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 5, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return build_session_factory(engine)


@pytest.fixture()
def file_session_factory(tmp_path: Path) -> Generator[sessionmaker[Session], None, None]:
    """Session factory over an on-disk database so separate connections really interleave."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'liftcheck-test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def share_factory(session_factory: sessionmaker[Session]) -> Callable[..., str]:
    """Return a helper that persists a pending share and returns its id."""

    def _create(factory: sessionmaker[Session] | None = None, **overrides: Any) -> str:
        weight = overrides.pop("weight", 100.0)
        reps = overrides.pop("reps", 5)
        fields: dict[str, Any] = {
            "submitter_id": f"lifter-{next(_SHARE_COUNTER)}",
            "exercise": "bench",
            "weight": weight,
            "reps": reps,
            "sets": 1,
            "country": "IT",
            "gym": "iron-temple",
            "username": "Lifter",
            "computed_score": compute_score(weight, reps),
            "status": ShareStatus.PENDING,
            "total_votes": 0,
            "approve_votes": 0,
            "reject_votes": 0,
        }
        fields.update(overrides)
        with (factory or session_factory).begin() as db:
            share = SharedItem(**fields)
            db.add(share)
            db.flush()
            return share.id

    return _create


@pytest.fixture()
def test_user(session_factory: sessionmaker[Session]) -> User:
    """Create and return a persisted user with a profile."""
    with session_factory.begin() as db:
        user = User(
            user_id="user-1",
            display_name="Test Lifter",
            avatar_url="https://cdn.example.com/a.png",
            country="IT",
            gym="iron-temple",
            is_admin=False,
        )
        db.add(user)
    return user


@pytest.fixture()
def app(session_factory: sessionmaker[Session]) -> Iterator[FastAPI]:
    def _get_db_override() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[app_get_session_factory] = lambda: session_factory
    fastapi_app.dependency_overrides[app_get_db] = _get_db_override
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Secret": ADMIN_SECRET}
