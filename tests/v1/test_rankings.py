# tests/v1/test_rankings.py
"""Tests for the leaderboard read endpoint."""

from fastapi import status

from liftcheck.models import ShareStatus
from liftcheck.services.rankings import RankingMaterializer


def test_leaderboard_lists_ranked_rows(client, session_factory, share_factory) -> None:
    materializer = RankingMaterializer(session_factory)
    strong = share_factory(status=ShareStatus.APPROVED, weight=140.0, username="Strong")
    light = share_factory(status=ShareStatus.APPROVED, weight=80.0)
    for share_id in (light, strong):
        materializer.ingest_share(share_id)
    materializer.rebuild_all()

    response = client.get("/api/v1/rankings/gym_iron-temple_bench")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["scope_kind"] == "gym"
    assert body["scope_value"] == "iron-temple"
    assert [row["share_id"] for row in body["entries"]] == [strong, light]
    assert body["entries"][0]["rank"] == 1
    assert body["entries"][0]["username"] == "Strong"
    assert body["last_updated"] is not None


def test_leaderboard_empty_until_rebuilt(client, session_factory, share_factory) -> None:
    RankingMaterializer(session_factory).ingest_share(share_factory(status=ShareStatus.APPROVED))

    response = client.get("/api/v1/rankings/global_bench")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["entries"] == []
    assert response.json()["last_updated"] is None


def test_unknown_leaderboard_is_not_found(client) -> None:
    response = client.get("/api/v1/rankings/global_snatch")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "not_found"}
