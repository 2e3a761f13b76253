# tests/v1/test_admin.py
"""Tests for the secret-guarded admin endpoints and user profiles."""

import pytest
from fastapi import status

from liftcheck.core.settings import settings
from liftcheck.models import ShareStatus, User
from liftcheck.services.rankings import RankingMaterializer

ADMIN_URL = "/api/v1/admin"


@pytest.mark.parametrize(
    "headers",
    [{}, {"X-Admin-Secret": "wrong"}, {"X-Admin-Secret": ""}],
)
def test_admin_requires_secret(client, headers) -> None:
    response = client.get(f"{ADMIN_URL}/metrics", headers=headers)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "unauthorized"}


def test_admin_disabled_without_configured_secret(client, admin_headers, monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_api_secret", None)

    response = client.get(f"{ADMIN_URL}/metrics", headers=admin_headers)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_set_admin_claim(client, session_factory, admin_headers, test_user) -> None:
    response = client.post(f"{ADMIN_URL}/claims", json={"uid": "user-1", "admin": True}, headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"ok": True}
    with session_factory() as db:
        assert db.get(User, "user-1").is_admin is True

    client.post(f"{ADMIN_URL}/claims", json={"uid": "user-1", "admin": False}, headers=admin_headers)
    assert client.get("/api/v1/users/user-1").json()["is_admin"] is False


def test_set_admin_claim_validates_payload(client, admin_headers) -> None:
    response = client.post(f"{ADMIN_URL}/claims", json={"uid": "user-1"}, headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "invalid_payload"}


def test_metrics_counts_entities(client, session_factory, admin_headers, share_factory, test_user) -> None:
    approved = share_factory(status=ShareStatus.APPROVED)
    share_factory()
    share_factory(status=ShareStatus.REJECTED)
    RankingMaterializer(session_factory).ingest_share(approved)

    response = client.get(f"{ADMIN_URL}/metrics", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["totals"] == {
        "users": 1,
        "shared_items": 3,
        "ranking_entries": 3,
        "leaderboards": 3,
    }
    assert body["shared_items_by_status"] == {"pending": 1, "approved": 1, "rejected": 1}


def test_rebuild_on_demand(client, session_factory, admin_headers, share_factory) -> None:
    RankingMaterializer(session_factory).ingest_share(share_factory(status=ShareStatus.APPROVED))

    response = client.post(f"{ADMIN_URL}/leaderboards/rebuild", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["ok"] is True
    assert sorted(body["rebuilt"]) == ["country_IT_bench", "global_bench", "gym_iron-temple_bench"]
    assert body["failed"] == {}
    assert len(client.get("/api/v1/rankings/global_bench").json()["entries"]) == 1


def test_profile_upsert_and_read(client) -> None:
    response = client.put("/api/v1/users/user-7", json={"display_name": "Seven", "gym": "forge"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["display_name"] == "Seven"

    client.put("/api/v1/users/user-7", json={"country": "ES"})
    profile = client.get("/api/v1/users/user-7").json()
    assert (profile["display_name"], profile["gym"], profile["country"]) == ("Seven", "forge", "ES")
    assert profile["is_admin"] is False


def test_unknown_user_is_not_found(client) -> None:
    response = client.get("/api/v1/users/nobody")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "not_found"}


def test_profile_rejects_scope_separator(client) -> None:
    response = client.put("/api/v1/users/user-8", json={"gym": "iron_temple"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "invalid_payload"}
