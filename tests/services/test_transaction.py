# tests/services/test_transaction.py
"""Tests for the optimistic transaction retry loop."""

import pytest
from sqlalchemy.orm.exc import StaleDataError

from liftcheck.core.errors import TransactionConflictError
from liftcheck.db.transaction import run_transaction
from liftcheck.models import User


def test_conflicts_are_retried_until_success(session_factory) -> None:
    attempts = []

    def _work(db):
        attempts.append(1)
        db.add(User(user_id=f"user-{len(attempts)}"))
        if len(attempts) < 3:
            raise StaleDataError("version mismatch")
        return len(attempts)

    assert run_transaction(session_factory, _work, label="test", max_attempts=5, backoff_seconds=0) == 3

    with session_factory() as db:
        # Rolled-back attempts leave nothing behind.
        assert db.get(User, "user-1") is None
        assert db.get(User, "user-3") is not None


def test_exhausted_retries_escalate(session_factory) -> None:
    def _work(db):
        raise StaleDataError("version mismatch")

    with pytest.raises(TransactionConflictError) as excinfo:
        run_transaction(session_factory, _work, label="always-stale", max_attempts=3, backoff_seconds=0)

    assert excinfo.value.attempts == 3
    assert excinfo.value.status_code == 500
    assert excinfo.value.code == "internal"
    assert isinstance(excinfo.value.__cause__, StaleDataError)


def test_other_errors_propagate_without_retry(session_factory) -> None:
    calls = []

    def _work(db):
        calls.append(1)
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        run_transaction(session_factory, _work, label="boom", max_attempts=5, backoff_seconds=0)
    assert len(calls) == 1
