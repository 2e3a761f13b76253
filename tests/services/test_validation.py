# tests/services/test_validation.py
"""Tests for the pending -> approved/rejected state machine."""

import pytest
from sqlalchemy import select

from liftcheck.core.errors import ShareNotFoundError
from liftcheck.models import RankingEntry, SharedItem, ShareStatus
from liftcheck.services.rankings import RankingMaterializer
from liftcheck.services.validation import ValidationPolicy, ValidationService, decide_status
from liftcheck.services.votes import VoteLedgerService

POLICY = ValidationPolicy(quorum=5, approval_ratio=0.6)


@pytest.fixture()
def validation(session_factory, clock) -> ValidationService:
    materializer = RankingMaterializer(session_factory, clock=clock)
    return ValidationService(session_factory, materializer, policy=POLICY, clock=clock)


def _cast(session_factory, share_id: str, ballots: str) -> None:
    """Cast one vote per character: ``a`` approves, ``r`` rejects."""
    ledger = VoteLedgerService(session_factory)
    for index, ballot in enumerate(ballots):
        ledger.cast_vote(share_id, f"voter-{index}", ballot == "a")


def _status(session_factory, share_id: str) -> ShareStatus:
    with session_factory() as db:
        return db.get(SharedItem, share_id).status


@pytest.mark.parametrize(
    ("total", "approve", "expected"),
    [
        (0, 0, ShareStatus.PENDING),
        (4, 4, ShareStatus.PENDING),
        (5, 3, ShareStatus.APPROVED),
        (5, 2, ShareStatus.REJECTED),
        (10, 6, ShareStatus.APPROVED),
        (10, 5, ShareStatus.REJECTED),
        (5, 0, ShareStatus.REJECTED),
    ],
)
def test_decide_status(total: int, approve: int, expected: ShareStatus) -> None:
    assert decide_status(total, approve, POLICY) is expected


def test_below_quorum_stays_pending(session_factory, share_factory, validation) -> None:
    share_id = share_factory()
    _cast(session_factory, share_id, "aaaa")

    result = validation.try_finalize(share_id)

    assert result.status is ShareStatus.PENDING
    assert result.transitioned is False
    assert _status(session_factory, share_id) is ShareStatus.PENDING


def test_three_of_five_approves(session_factory, share_factory, validation, clock) -> None:
    share_id = share_factory()
    _cast(session_factory, share_id, "aaarr")

    result = validation.try_finalize(share_id)

    assert result.transitioned is True
    assert result.status is ShareStatus.APPROVED
    with session_factory() as db:
        share = db.get(SharedItem, share_id)
        assert share.status is ShareStatus.APPROVED
        assert share.finalized_at is not None


def test_two_of_five_rejects_without_rankings(session_factory, share_factory, validation) -> None:
    share_id = share_factory()
    _cast(session_factory, share_id, "aarrr")

    result = validation.try_finalize(share_id)

    assert result.status is ShareStatus.REJECTED
    assert result.scopes == ()
    with session_factory() as db:
        assert db.scalars(select(RankingEntry)).all() == []


def test_finalization_happens_once(session_factory, share_factory, validation) -> None:
    share_id = share_factory()
    _cast(session_factory, share_id, "aaaaa")

    results = [validation.try_finalize(share_id) for _ in range(3)]

    assert [r.transitioned for r in results] == [True, False, False]
    assert {r.status for r in results} == {ShareStatus.APPROVED}


def test_late_votes_do_not_reopen_a_finalized_share(session_factory, share_factory, validation) -> None:
    share_id = share_factory()
    _cast(session_factory, share_id, "aaaaa")
    validation.try_finalize(share_id)

    ledger = VoteLedgerService(session_factory)
    for index in range(5):
        ledger.cast_vote(share_id, f"late-{index}", False)
    result = validation.try_finalize(share_id)

    assert result.status is ShareStatus.APPROVED
    assert result.transitioned is False
    with session_factory() as db:
        assert db.get(SharedItem, share_id).total_votes == 5


def test_approval_fans_out_to_every_scope(session_factory, share_factory, validation) -> None:
    share_id = share_factory(exercise="squat", country="IT", gym="iron-temple", weight=150.0, reps=3)
    _cast(session_factory, share_id, "aaaar")

    result = validation.try_finalize(share_id)

    expected = {"global_squat", "country_IT_squat", "gym_iron-temple_squat"}
    assert set(result.scopes) == expected
    with session_factory() as db:
        entries = db.scalars(select(RankingEntry).where(RankingEntry.share_id == share_id)).all()
        assert {entry.scope_key for entry in entries} == expected
        assert {entry.computed_score for entry in entries} == {165}


def test_approval_without_gym_skips_gym_scope(session_factory, share_factory, validation) -> None:
    share_id = share_factory(gym=None)
    _cast(session_factory, share_id, "aaaaa")

    result = validation.try_finalize(share_id)

    assert set(result.scopes) == {"global_bench", "country_IT_bench"}


def test_unknown_share_raises(validation) -> None:
    with pytest.raises(ShareNotFoundError):
        validation.try_finalize("missing")
