# tests/services/test_vote_ledger.py
"""Tests for the vote ledger."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm.exc import StaleDataError

from liftcheck.core.errors import ShareNotFoundError
from liftcheck.core.settings import settings
from liftcheck.models import SharedItem, ShareStatus, ShareVoter
from liftcheck.services.votes import VoteLedgerService, VoteOutcome


def _ledger(session_factory, share_id: str) -> tuple[int, int, int, list[str]]:
    with session_factory() as db:
        share = db.get(SharedItem, share_id)
        voters = list(
            db.scalars(select(ShareVoter.voter_id).where(ShareVoter.share_id == share_id))
        )
        return share.total_votes, share.approve_votes, share.reject_votes, sorted(voters)


def test_cast_vote_records_approve_and_reject(session_factory, share_factory) -> None:
    share_id = share_factory()
    ledger = VoteLedgerService(session_factory)

    assert ledger.cast_vote(share_id, "v1", True) is VoteOutcome.RECORDED
    assert ledger.cast_vote(share_id, "v2", False) is VoteOutcome.RECORDED

    assert _ledger(session_factory, share_id) == (2, 1, 1, ["v1", "v2"])


def test_second_vote_by_same_voter_is_a_no_op(session_factory, share_factory) -> None:
    share_id = share_factory()
    ledger = VoteLedgerService(session_factory)

    ledger.cast_vote(share_id, "v1", True)
    once = _ledger(session_factory, share_id)

    assert ledger.cast_vote(share_id, "v1", True) is VoteOutcome.ALREADY_VOTED
    assert ledger.cast_vote(share_id, "v1", False) is VoteOutcome.ALREADY_VOTED
    assert _ledger(session_factory, share_id) == once


def test_vote_on_finalized_share_is_ignored(session_factory, share_factory) -> None:
    share_id = share_factory(status=ShareStatus.APPROVED)
    ledger = VoteLedgerService(session_factory)

    assert ledger.cast_vote(share_id, "v1", False) is VoteOutcome.ALREADY_FINALIZED
    assert _ledger(session_factory, share_id) == (0, 0, 0, [])


def test_submitter_cannot_vote_on_own_share(session_factory, share_factory) -> None:
    share_id = share_factory(submitter_id="owner")

    assert VoteLedgerService(session_factory).cast_vote(share_id, "owner", True) is VoteOutcome.SELF_VOTE
    assert _ledger(session_factory, share_id) == (0, 0, 0, [])

    permissive = VoteLedgerService(session_factory, prevent_self_vote=False)
    assert permissive.cast_vote(share_id, "owner", True) is VoteOutcome.RECORDED


def test_unknown_share_raises_not_found(session_factory) -> None:
    with pytest.raises(ShareNotFoundError):
        VoteLedgerService(session_factory).cast_vote("missing", "v1", True)


def test_stale_ledger_write_is_rejected(file_session_factory, share_factory) -> None:
    """A writer holding an outdated ledger cannot overwrite a newer one."""
    share_id = share_factory(file_session_factory)
    first = file_session_factory()
    second = file_session_factory()
    try:
        a = first.get(SharedItem, share_id)
        b = second.get(SharedItem, share_id)

        a.total_votes += 1
        a.approve_votes += 1
        first.commit()

        b.total_votes += 1
        b.reject_votes += 1
        with pytest.raises(StaleDataError):
            second.commit()
    finally:
        second.rollback()
        first.close()
        second.close()


def test_concurrent_distinct_voters_lose_no_updates(
    file_session_factory, share_factory, monkeypatch
) -> None:
    share_id = share_factory(file_session_factory)
    ledger = VoteLedgerService(file_session_factory)
    voters = [(f"voter-{i}", i % 3 != 0) for i in range(8)]

    monkeypatch.setattr(settings, "transaction_max_attempts", 50)
    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(lambda v: ledger.cast_vote(share_id, *v), voters))

    assert outcomes == [VoteOutcome.RECORDED] * len(voters)
    total, approve, reject, recorded = _ledger(file_session_factory, share_id)
    assert total == approve + reject == len(recorded) == len(voters)
    assert approve == sum(1 for _, ok in voters if ok)

    with file_session_factory() as db:
        distinct = db.scalar(
            select(func.count(func.distinct(ShareVoter.voter_id))).where(ShareVoter.share_id == share_id)
        )
    assert distinct == len(voters)


def test_concurrent_duplicate_votes_count_once(
    file_session_factory, share_factory, monkeypatch
) -> None:
    """Retried requests from one voter racing each other are applied exactly once."""
    share_id = share_factory(file_session_factory)
    ledger = VoteLedgerService(file_session_factory)

    monkeypatch.setattr(settings, "transaction_max_attempts", 50)
    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(lambda _: ledger.cast_vote(share_id, "dup", True), range(8)))

    assert outcomes.count(VoteOutcome.RECORDED) == 1
    assert outcomes.count(VoteOutcome.ALREADY_VOTED) == 7
    assert _ledger(file_session_factory, share_id) == (1, 1, 0, ["dup"])
