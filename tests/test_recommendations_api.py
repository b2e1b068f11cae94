"""
Recommendations, Gifts, and Trends API

Tests the HTTP layer with authentication overridden and loaders mocked:
- POST /api/v1/recommendations builds the context from request interests
  and recipient history, and tolerates a missing recipient
- POST /api/v1/recommendations/score ranks caller-supplied gifts
- GET /api/v1/gifts and /api/v1/gifts/{id} (404 when missing)
- GET /api/v1/trends/gifts and /api/v1/trends/categories
- Validation errors → 422, unexpected failures → 500, no token → 401

Run with: pytest tests/test_recommendations_api.py -v
"""

from unittest.mock import AsyncMock, patch

import pytest

from giftly.agents.state import GiftCandidate, Recipient
from giftly.core.security import get_current_user_id
from giftly.main import app

TEST_USER_ID = "11111111-2222-3333-4444-555555555555"


def _gift(gift_id: str, title: str, **overrides) -> GiftCandidate:
    data = {"id": gift_id, "title": title, "price": 30.0, "base_match_score": 70}
    data.update(overrides)
    return GiftCandidate(**data)


def _catalog() -> list[GiftCandidate]:
    return [
        _gift("1", "Desk Plant", base_match_score=80, category="Home & Living"),
        _gift("2", "Trail Map", tags=["hiking"], category="Outdoors", is_trending=True),
        _gift("3", "Espresso Cups", base_match_score=60, reasoning="for the coffee lover"),
    ]


@pytest.fixture
def client():
    """TestClient with auth overridden to a fixed user."""
    from fastapi.testclient import TestClient

    async def _mock_auth() -> str:
        return TEST_USER_ID

    app.dependency_overrides[get_current_user_id] = _mock_auth
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_current_user_id, None)


@pytest.fixture
def mock_catalog():
    with patch(
        "giftly.agents.pipeline.load_candidate_gifts",
        new_callable=AsyncMock,
        return_value=_catalog(),
    ) as m:
        yield m


# ======================================================================
# POST /api/v1/recommendations
# ======================================================================

class TestRecommendations:

    def test_personalized_with_recipient(self, client, mock_catalog):
        recipient = Recipient(id="r1", name="Jordan", gift_history=["Desk Plant"])
        with patch(
            "giftly.api.recommendations.load_recipient",
            new_callable=AsyncMock,
            return_value=recipient,
        ) as load:
            resp = client.post("/api/v1/recommendations", json={
                "recipient_id": "r1",
                "budget": 50,
                "interests": ["hiking", "coffee"],
            })

        assert resp.status_code == 200
        data = resp.json()
        assert data["personalized"] is True
        assert data["count"] == 3
        titles = [g["title"] for g in data["recommendations"]]
        assert titles == ["Trail Map", "Espresso Cups", "Desk Plant"]

        top = data["recommendations"][0]
        assert top["match_score"] == 85
        assert top["personalization_delta"] == 15
        assert top["personalization_reasons"] == ["Matches hiking interest"]
        assert top["is_personalized"] is True

        load.assert_awaited_once_with("r1", TEST_USER_ID)
        mock_catalog.assert_awaited_once_with(budget=50)

    def test_missing_recipient_still_uses_interests(self, client, mock_catalog):
        with patch(
            "giftly.api.recommendations.load_recipient",
            new_callable=AsyncMock,
            side_effect=ValueError("missing"),
        ):
            resp = client.post("/api/v1/recommendations", json={
                "recipient_id": "gone",
                "interests": ["hiking"],
            })

        assert resp.status_code == 200
        data = resp.json()
        assert data["personalized"] is True
        desk = next(g for g in data["recommendations"] if g["title"] == "Desk Plant")
        assert desk["personalization_delta"] == 0

    def test_recipient_store_error_still_uses_interests(self, client, mock_catalog):
        with patch(
            "giftly.api.recommendations.load_recipient",
            new_callable=AsyncMock,
            side_effect=RuntimeError("invalid input syntax for type uuid"),
        ):
            resp = client.post("/api/v1/recommendations", json={
                "recipient_id": "not-a-uuid",
                "interests": ["hiking"],
            })

        assert resp.status_code == 200
        data = resp.json()
        assert data["personalized"] is True
        trail = next(g for g in data["recommendations"] if g["title"] == "Trail Map")
        assert trail["match_score"] == 85

    def test_personalization_disabled(self, client, mock_catalog):
        with patch(
            "giftly.api.recommendations.load_recipient",
            new_callable=AsyncMock,
        ) as load:
            resp = client.post("/api/v1/recommendations", json={
                "recipient_id": "r1",
                "interests": ["hiking"],
                "include_personalization": False,
            })

        assert resp.status_code == 200
        data = resp.json()
        assert data["personalized"] is False
        assert [g["match_score"] for g in data["recommendations"]] == [80, 70, 60]
        load.assert_not_awaited()

    def test_no_context(self, client, mock_catalog):
        resp = client.post("/api/v1/recommendations", json={})
        assert resp.status_code == 200
        assert resp.json()["personalized"] is False

    def test_blank_interests_dropped(self, client, mock_catalog):
        resp = client.post("/api/v1/recommendations", json={"interests": ["  ", ""]})
        assert resp.status_code == 200
        assert resp.json()["personalized"] is False

    def test_empty_catalog_returns_empty_list(self, client):
        with patch(
            "giftly.agents.pipeline.load_candidate_gifts",
            new_callable=AsyncMock,
            return_value=[],
        ):
            resp = client.post("/api/v1/recommendations", json={"budget": 1})

        assert resp.status_code == 200
        assert resp.json()["recommendations"] == []
        assert resp.json()["count"] == 0

    def test_invalid_budget_returns_422(self, client):
        resp = client.post("/api/v1/recommendations", json={"budget": -10})
        assert resp.status_code == 422

    def test_catalog_failure_returns_500(self, client):
        with patch(
            "giftly.agents.pipeline.load_candidate_gifts",
            new_callable=AsyncMock,
            side_effect=RuntimeError("database down"),
        ):
            resp = client.post("/api/v1/recommendations", json={})
        assert resp.status_code == 500


# ======================================================================
# POST /api/v1/recommendations/score
# ======================================================================

class TestScoreEndpoint:

    def test_scores_supplied_gifts(self, client):
        resp = client.post("/api/v1/recommendations/score", json={
            "gifts": [
                {"id": "a", "title": "Socks", "base_match_score": 70},
                {
                    "id": "b",
                    "title": "Trail Running Shoes",
                    "tags": ["hiking", "outdoor"],
                    "reasoning": "great for trails",
                    "base_match_score": 70,
                },
            ],
            "context": {"interests": ["hiking"], "gift_history": []},
        })

        assert resp.status_code == 200
        ranked = resp.json()["recommendations"]
        assert [g["id"] for g in ranked] == ["b", "a"]
        assert ranked[0]["match_score"] == 85

    def test_malformed_score_defaults(self, client):
        resp = client.post("/api/v1/recommendations/score", json={
            "gifts": [{"id": "a", "title": "Socks", "base_match_score": "oops"}],
        })
        assert resp.status_code == 200
        assert resp.json()["recommendations"][0]["match_score"] == 75
        assert resp.json()["personalized"] is False

    def test_empty_gifts(self, client):
        resp = client.post("/api/v1/recommendations/score", json={"gifts": []})
        assert resp.status_code == 200
        assert resp.json()["count"] == 0

    def test_gifts_must_be_a_list(self, client):
        resp = client.post("/api/v1/recommendations/score", json={"gifts": "nope"})
        assert resp.status_code == 422


# ======================================================================
# Gifts and trends
# ======================================================================

class TestGiftsApi:

    def test_list_gifts(self, client):
        with patch("giftly.api.gifts.load_gifts", new_callable=AsyncMock, return_value=_catalog()):
            resp = client.get("/api/v1/gifts")
        assert resp.status_code == 200
        assert resp.json()["count"] == 3

    def test_get_gift(self, client):
        with patch(
            "giftly.api.gifts.load_gift",
            new_callable=AsyncMock,
            return_value=_catalog()[1],
        ):
            resp = client.get("/api/v1/gifts/2")
        assert resp.status_code == 200
        assert resp.json()["title"] == "Trail Map"

    def test_get_gift_missing(self, client):
        with patch(
            "giftly.api.gifts.load_gift",
            new_callable=AsyncMock,
            side_effect=ValueError("missing"),
        ):
            resp = client.get("/api/v1/gifts/999")
        assert resp.status_code == 404

    def test_get_gift_store_failure_returns_500(self, client):
        with patch(
            "giftly.api.gifts.load_gift",
            new_callable=AsyncMock,
            side_effect=RuntimeError("database down"),
        ):
            resp = client.get("/api/v1/gifts/2")
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Unable to load this gift right now. Please try again."


class TestTrendsApi:

    def test_trending_gifts(self, client):
        with patch(
            "giftly.services.trending.load_gifts",
            new_callable=AsyncMock,
            return_value=_catalog(),
        ):
            resp = client.get("/api/v1/trends/gifts", params={"sort_by": "trending"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["gifts"][0]["title"] == "Trail Map"
        assert data["sort_by"] == "trending"

    def test_unknown_sort_returns_422(self, client):
        resp = client.get("/api/v1/trends/gifts", params={"sort_by": "random"})
        assert resp.status_code == 422

    def test_trending_categories(self, client):
        with patch(
            "giftly.services.trending.load_gifts",
            new_callable=AsyncMock,
            return_value=_catalog(),
        ):
            resp = client.get("/api/v1/trends/categories")
        assert resp.status_code == 200
        assert resp.json()["categories"][0]["name"] == "Outdoors"


# ======================================================================
# Authentication
# ======================================================================

class TestAuthRequired:

    def test_no_token_returns_401(self):
        from fastapi.testclient import TestClient
        resp = TestClient(app).post("/api/v1/recommendations", json={})
        assert resp.status_code == 401
        assert resp.headers.get("www-authenticate") == "Bearer"

    def test_health_is_public(self):
        from fastapi.testclient import TestClient
        resp = TestClient(app).get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
