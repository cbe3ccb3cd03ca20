import asyncio
import json

from conftest import FakeClient
from models import CoffeeMetadata, PastryMetadata
from services.metadata_service import MetadataService, coerce_metadata
from utils.circuit_breaker import CircuitBreaker


def make_service(client):
    return MetadataService(client=client, circuit_breaker=CircuitBreaker(name="metadata_test", failure_threshold=100))


def test_coffee_metadata_from_model():
    reply = json.dumps({
        "roast_type": "Dark",
        "origin": "Brazil",
        "acidity": 2,
        "flavor_notes": "chocolate, nutty",
        "popularity_hint": 0.8,
    })

    meta = asyncio.run(make_service(FakeClient(default=reply)).generate_coffee_metadata("Santos"))

    assert meta.roast_type == "Dark"
    assert meta.origin == "Brazil"
    assert meta.acidity == 2
    assert meta.is_core is True


def test_invalid_fields_take_defaults():
    reply = json.dumps({"sweetness": 9, "richness": 4, "texture_tags": "flaky", "popularity_hint": "very"})

    meta = asyncio.run(make_service(FakeClient(default=reply)).generate_pastry_metadata("Croissant"))

    assert meta.sweetness == 3
    assert meta.richness == 4
    assert meta.texture_tags == "flaky"
    assert meta.popularity_hint == 0.6


def test_unusable_reply_gives_defaults():
    meta = asyncio.run(make_service(FakeClient(default="I am not sure.")).generate_coffee_metadata("Mystery"))
    assert meta == CoffeeMetadata()


def test_model_error_gives_defaults():
    meta = asyncio.run(make_service(FakeClient(default=RuntimeError("down"))).generate_pastry_metadata("Scone"))
    assert meta == PastryMetadata()


def test_unconfigured_gives_defaults(monkeypatch):
    from config.settings import settings
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)

    service = MetadataService()

    assert service.client is None
    assert asyncio.run(service.generate_coffee_metadata("Anything")) == CoffeeMetadata()


def test_coerce_treats_empty_roast_as_medium():
    meta = coerce_metadata(CoffeeMetadata, {"roast_type": "", "acidity": 6, "season_hint": "fall"})

    assert meta.roast_type == "Medium"
    assert meta.acidity == 3
    assert meta.season_hint == "fall"
