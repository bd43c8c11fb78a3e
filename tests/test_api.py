"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from app.api.main import app
from app.api.routes import get_repository
from app.models import ProviderRecord
from app.repository import InMemoryProviderRepository


@pytest.fixture
def repository():
    return InMemoryProviderRepository([
        ProviderRecord(
            ccn="450001",
            state="TX",
            county="Travis",
            ownership_type="For-Profit",
            quality_score=80,
            compliance_score=75,
            estimated_adc=40,
            con_state=True,
            owner_count=1,
        ),
        ProviderRecord(ccn="450002", state="TX", county="Travis", estimated_adc=45),
        ProviderRecord(ccn="450003", state="TX", county="Harris", estimated_adc=120),
        ProviderRecord(ccn="370001", state="OK", estimated_adc=40),
    ])


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestEvaluateEndpoint:
    """Tests for POST /api/evaluate."""

    def test_batch_with_failure(self, client):
        response = client.post("/api/evaluate", json={
            "records": [
                {"ccn": "450001", "quality_score": 80, "compliance_score": 75, "estimated_adc": 40},
                {"provider_name": "No CCN"},
            ],
        })
        assert response.status_code == 200
        body = response.json()
        assert (body["total"], body["evaluated"], body["failed"]) == (2, 1, 1)
        assert body["results"][0]["classification"]["classification"] == "GREEN"
        assert body["results"][1]["index"] == 1

    def test_save_stores_results(self, client, repository):
        client.post("/api/evaluate", json={
            "records": [{"ccn": "480001", "compliance_score": 90}],
            "save": True,
        })
        assert repository.load("480001") is not None
        assert [e.ccn for e in repository.load_results()] == ["480001"]

    def test_invalid_multiples_rejected(self, client):
        response = client.post("/api/evaluate", json={
            "records": [{"ccn": "450001"}],
            "multiples": {"revenue_multiple": {"low": 3, "median": 2, "high": 1}},
        })
        assert response.status_code == 400


class TestRecordEndpoints:
    """Tests for single-record analyses."""

    def test_valuation(self, client):
        response = client.post("/api/valuation", json={
            "record": {"ccn": "450001", "estimated_adc": 40},
            "multiples": {"per_adc_value": {"low": 8000, "median": 10000, "high": 12000}},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["adc_based"]["median"] == 400_000
        assert body["revenue_based"] is None

    def test_carry_back(self, client):
        response = client.post("/api/carry-back", json={"ccn": "450001", "owner_age": 68})
        assert response.status_code == 200
        assert response.json()["score"] == 30

    def test_carry_back_requires_ccn(self, client):
        response = client.post("/api/carry-back", json={"owner_age": 68})
        assert response.status_code == 422

    def test_data_quality(self, client):
        response = client.post("/api/data-quality", json={"ccn": "450001"})
        assert response.status_code == 200
        assert response.json()["needs_review"] is True


class TestStoredProviderEndpoints:
    """Tests for endpoints backed by the repository."""

    def test_get_provider(self, client):
        response = client.get("/api/providers/450001")
        assert response.status_code == 200
        assert response.json()["classification"]["classification"] == "GREEN"

    def test_get_provider_not_found(self, client):
        assert client.get("/api/providers/999999").status_code == 404

    def test_similar_stays_in_state(self, client):
        response = client.get("/api/providers/450002/similar")
        assert response.status_code == 200
        neighbors = [n["ccn"] for n in response.json()["neighbors"]]
        assert neighbors == ["450001", "450003"]

    def test_similar_limit(self, client):
        response = client.get("/api/providers/450002/similar", params={"limit": 1})
        assert len(response.json()["neighbors"]) == 1

    def test_consolidation_without_results(self, client):
        assert client.get("/api/consolidation").status_code == 404

    def test_consolidation(self, client):
        client.post("/api/evaluate", json={
            "records": [
                {"ccn": "450001", "state": "TX", "quality_score": 80,
                 "compliance_score": 75, "estimated_adc": 40},
                {"ccn": "370001", "state": "OK"},
            ],
            "save": True,
        })
        report = client.get("/api/consolidation").json()
        assert report["summary"]["total"] == 2
        assert [g["key"] for g in report["by_state"]] == ["OK", "TX"]

        pipeline = client.get("/api/consolidation/pipeline").json()
        assert pipeline["platform_candidates"] == 1

    def test_scoring_criteria(self, client):
        body = client.get("/api/scoring/criteria").json()
        assert body["adc_ceiling"] == 60
        assert body["weights"]["quality"] == 25
