import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from models import CoffeeItem, PastryItem
from services.pairing import get_pairing_tables, build_pairing_tables
from utils.circuit_breaker import CircuitBreaker


def completion(content: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def narrative_json(tagline: str = "A cosy autumn classic", tags: Optional[List[str]] = None, **extra) -> str:
    payload: Dict[str, Any] = {
        "marketing_tagline": tagline,
        "explanation": "Cocoa depth meets toasted almond sweetness.",
        "flavor_tags": tags or ["Nutty", "Cocoa"],
    }
    payload.update(extra)
    return json.dumps(payload)


class FakeCompletions:
    """Replies keyed by a substring of the user prompt; values are text or an exception to raise."""

    def __init__(self, replies: Dict[str, Any], default: Any = None):
        self.replies = replies
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        prompt = kwargs["messages"][-1]["content"]

        reply = self.default
        for key, value in self.replies.items():
            if key in prompt:
                reply = value
                break

        if isinstance(reply, BaseException):
            raise reply
        return completion(reply)


class FakeClient:
    def __init__(self, replies: Optional[Dict[str, Any]] = None, default: Any = None):
        self.completions = FakeCompletions(replies or {}, default)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def tables():
    return get_pairing_tables()


@pytest.fixture
def maxed_tables():
    # every component can hit its ceiling
    return build_pairing_tables({
        "flavor_compatibility": {"cocoa": ["hazelnut"]},
        "origin_affinity": {"brazil": ["hazelnut"]},
        "roast_textures": {"dark": ["fudgy"], "light": ["airy"]},
        "seasonal_factors": {"fall": 1.05},
        "popularity_factors": {0.9: 1.05},
    })


@pytest.fixture
def breaker():
    return CircuitBreaker(name="test_narrative", failure_threshold=100, recovery_timeout_seconds=60)


@pytest.fixture
def santos():
    return CoffeeItem(
        id="c-santos",
        name="Santos Dark",
        flavor_notes="chocolate, nutty",
        popularity_hint=0.8,
        origin="brazil",
        acidity=2,
        roast_type="dark",
    )


@pytest.fixture
def frangipane():
    return PastryItem(
        id="p-frangipane",
        name="Almond Frangipane",
        flavor_tags="almond, caramel",
        texture_tags="dense, rich",
        popularity_hint=0.7,
        sweetness=4,
        richness=4,
        allergen_info="Contains gluten, almonds",
    )


@pytest.fixture
def pastries(frangipane):
    return [
        PastryItem(
            id="p-lemon",
            name="Lemon Scone",
            flavor_tags="lemon, citrus",
            texture_tags="crispy, airy",
            popularity_hint=0.5,
            sweetness=3,
            richness=2,
        ),
        frangipane,
        PastryItem(
            id="p-brownie",
            name="Hazelnut Brownie",
            flavor_tags="chocolate & hazelnut",
            texture_tags="fudgy | dense",
            popularity_hint=0.8,
            sweetness=5,
            richness=5,
        ),
        PastryItem(
            id="p-plain",
            name="Plain Roll",
            popularity_hint=0.3,
        ),
    ]
