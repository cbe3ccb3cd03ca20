import json

import pytest
from fastapi.testclient import TestClient

from conftest import FakeClient, narrative_json
from main import app
from routes.api import get_pairing_service, get_metadata_service
from services.metadata_service import MetadataService
from services.narrative import NarrativeEnhancementService
from services.pairing_service import PairingService
from utils.circuit_breaker import CircuitBreaker


ANCHOR = {
    "id": "c-santos",
    "name": "Santos Dark",
    "flavor_notes": "chocolate, nutty",
    "popularity_hint": 0.8,
    "origin": "brazil",
    "acidity": 2,
    "roast_type": "dark",
}

FRANGIPANE = {
    "id": "p-frangipane",
    "name": "Almond Frangipane",
    "flavor_tags": "almond, caramel",
    "texture_tags": "dense, rich",
    "popularity_hint": 0.7,
    "sweetness": 4,
    "richness": 4,
}

LEMON = {
    "id": "p-lemon",
    "name": "Lemon Scone",
    "flavor_tags": "lemon, citrus",
    "texture_tags": "crispy, airy",
    "popularity_hint": 0.5,
    "sweetness": 3,
    "richness": 2,
}


@pytest.fixture
def client():
    narrative = NarrativeEnhancementService(
        client=FakeClient(default=narrative_json()),
        circuit_breaker=CircuitBreaker(name="api_narrative", failure_threshold=100),
    )
    metadata = MetadataService(
        client=FakeClient(default=json.dumps({"flavor_tags": "butter", "texture_tags": "flaky, airy", "sweetness": 2})),
        circuit_breaker=CircuitBreaker(name="api_metadata", failure_threshold=100),
    )
    app.dependency_overrides[get_pairing_service] = lambda: PairingService(narrative=narrative)
    app.dependency_overrides[get_metadata_service] = lambda: metadata

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/api/v1/health").json()["status"] == "ok"
    assert client.get("/api/v1/health/live").json()["alive"] is True

    ready = client.get("/api/v1/health/ready").json()
    assert ready["ready"] is True
    assert ready["checks"]["pairing_tables"]["status"] == "ready"


def test_pairings(client):
    response = client.post(
        "/api/v1/pairings",
        json={"anchor": ANCHOR, "candidates": [LEMON, FRANGIPANE], "top_k": 2, "enhance": True},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ui"]["layout"] == "cards"
    assert [p["pastry"]["name"] for p in body["pairs"]] == ["Almond Frangipane", "Lemon Scone"]
    assert body["pairs"][0]["narrative_source"] == "model"
    assert body["pairs"][0]["score"] > body["pairs"][1]["score"]


def test_pairings_without_candidates(client):
    body = client.post("/api/v1/pairings", json={"anchor": ANCHOR, "candidates": []}).json()

    assert body["pairs"] == []
    assert body["ui"]["layout"] == "empty"
    assert body["ui"]["notes"].startswith("No pairings available")


def test_correlation_id_is_echoed(client):
    response = client.post(
        "/api/v1/pairings",
        json={"anchor": ANCHOR, "candidates": [FRANGIPANE], "enhance": False},
        headers={"X-Correlation-ID": "abc-123"},
    )

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert "X-Request-Duration-Ms" in response.headers


def test_score(client):
    body = client.post("/api/v1/pairings/score", json={"anchor": ANCHOR, "candidate": FRANGIPANE}).json()

    assert body["overall"] == pytest.approx(0.8675, abs=1e-3)
    assert body["breakdown"]["texture"] == body["breakdown"]["roast_texture"]
    assert "seasonal" in body["breakdown"]


def test_out_of_range_popularity_is_rejected(client):
    bad = dict(FRANGIPANE, popularity_hint=1.5)
    response = client.post("/api/v1/pairings/score", json={"anchor": ANCHOR, "candidate": bad})

    assert response.status_code == 422


def test_reverse_pairings(client):
    house = {"id": "c-house", "name": "House Blend", "flavor_notes": "caramel, honey", "popularity_hint": 0.7}
    body = client.post(
        "/api/v1/pairings/reverse",
        json={"pastry": FRANGIPANE, "coffees": [house, ANCHOR], "top_k": 1},
    ).json()

    assert len(body) == 1
    assert body[0]["coffee"]["name"] == "Santos Dark"


def test_pastry_metadata(client):
    body = client.post("/api/v1/metadata/pastry", json={"name": " Croissant "}).json()

    assert body["texture_tags"] == "flaky, airy"
    assert body["sweetness"] == 2
    assert body["richness"] == 3


def test_metadata_requires_a_name(client):
    assert client.post("/api/v1/metadata/coffee", json={"name": ""}).status_code == 422


def test_metrics_disabled_by_default(client):
    assert client.get("/metrics").status_code == 404
