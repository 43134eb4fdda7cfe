"""
Test Suite for the HTTP API
"""

import pytest
from fastapi.testclient import TestClient

from api.calculate import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def payload():
    """Provider-shaped request body (camelCase keys)."""
    return {
        "brandKeywords": [
            {"keyword": "nike", "searchVolume": 10000, "isOwnBrand": True},
            {"keyword": "adidas", "searchVolume": 15000, "isOwnBrand": False},
        ],
        "rankedKeywords": [
            {"keyword": "running shoes", "searchVolume": 1000, "position": 1, "url": "/running"},
        ],
    }


class TestHealth:
    """Test the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert "timestamp" in data


class TestCalculate:
    """Test POST /api/calculate."""

    def test_headline_metrics(self, client, payload):
        response = client.post("/api/calculate", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["share_of_search"] == 40.0
        assert data["share_of_voice"] == 28.0
        assert data["growth_gap"] == -12.0
        assert data["interpretation"] == "missing_opportunities"
        assert data["brand_volume"] == 10000
        assert data["total_brand_volume"] == 25000
        assert data["visible_volume"] == 280
        assert data["total_market_volume"] == 1000
        assert data["has_brand_data"] is True
        assert data["warnings"] == []

    def test_snake_case_keys(self, client, payload):
        body = {
            "brand_keywords": payload["brandKeywords"],
            "ranked_keywords": payload["rankedKeywords"],
        }
        response = client.post("/api/calculate", json=body)

        assert response.status_code == 200
        assert response.json()["share_of_search"] == 40.0

    def test_missing_brand_keywords_rejected(self, client, payload):
        payload["brandKeywords"] = []
        response = client.post("/api/calculate", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == ["At least one brand keyword is required"]

    def test_invalid_row_rejected(self, client, payload):
        payload["rankedKeywords"].append({"searchVolume": 10})
        response = client.post("/api/calculate", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == ["Invalid keyword text at ranked index 1"]

    def test_value_problems_returned_as_warnings(self, client, payload):
        payload["rankedKeywords"].append({"keyword": "broken", "searchVolume": -10, "position": 0})
        response = client.post("/api/calculate", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["share_of_voice"] == 28.0
        assert data["warnings"] == [
            "Ranked keyword 1: negative search volume clamped to 0",
            "Ranked keyword 1: position 0 out of range, treated as unranked",
        ]


class TestInsights:
    """Test POST /api/insights."""

    def test_full_analysis(self, client, payload):
        payload["rankedKeywords"] += [
            {"keyword": "trail running shoes", "searchVolume": 8000, "position": 9, "url": "/trail",
             "searchIntent": {"mainIntent": "commercial", "probability": 0.8}},
            {"keyword": "running shoes", "searchVolume": 1000, "position": 6, "url": "/blog/running"},
        ]
        payload["brandContext"] = {"brandName": "nike", "industry": "Sports", "seoFocus": ["running"]}

        response = client.post("/api/insights", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["sos"]["share_of_search"] == 40.0
        assert data["gap"]["interpretation"] in {"growth_potential", "missing_opportunities", "balanced"}
        assert len(data["cannibalization_issues"]) == 1
        assert data["quick_wins"][0]["keyword"] == "trail running shoes"
        assert data["quick_wins"][0]["is_recommended"] is True
        assert data["action_list"]
        assert data["summary"]["ranked_keyword_count"] == 3
        assert data["competitor_strengths"][0]["competitor"] == "Adidas"
        assert data["intent_opportunities"][0]["keyword"] == "trail running shoes"
        assert data["warnings"] == []

    def test_brand_keywords_optional(self, client, payload):
        payload["brandKeywords"] = []
        response = client.post("/api/insights", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["sos"]["has_data"] is False
        assert data["sos"]["share_of_search"] == 0.0

    def test_ranked_keywords_required(self, client, payload):
        payload["rankedKeywords"] = []
        response = client.post("/api/insights", json=payload)

        assert response.status_code == 422

    def test_malformed_brand_context_is_warning(self, client, payload):
        payload["brandContext"] = {"industry": 5, "productCategories": "running"}
        response = client.post("/api/insights", json=payload)

        assert response.status_code == 200
        assert response.json()["warnings"] == [
            "Brand context industry: expected text, got int",
            "Brand context productCategories: single value treated as a one-item list",
        ]

    def test_brand_context_must_be_object(self, client, payload):
        payload["brandContext"] = ["running"]
        response = client.post("/api/insights", json=payload)

        assert response.status_code == 422
