from __future__ import annotations
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models import CoffeeMetadata, PastryMetadata
from services.llm_client import get_async_client, request_completion, parse_json_object
from utils.circuit_breaker import CircuitBreaker, metadata_circuit_breaker
from utils.fallback import with_fallback
from utils.logger import setup_logger

logger = setup_logger(__name__)

M = TypeVar("M", bound=BaseModel)

COFFEE_METADATA_PROMPT = (
    "You are a coffee expert. Describe the named coffee for a café inventory.\n"
    "Return ONLY a JSON object (no markdown, no explanation) with fields:\n"
    '  roast_type: one of ["Light", "Medium", "Medium-Dark", "Dark", "Espresso"]\n'
    '  preparation: common brewing methods, e.g. "Espresso, French Press"\n'
    '  sort_blend: bean composition, e.g. "100% Arabica"\n'
    '  origin: country or region, empty string if unknown\n'
    "  acidity: number 1-5 (1=low, 5=high)\n"
    '  flavor_notes: comma-separated descriptors, e.g. "chocolate, nutty, caramel"\n'
    '  season_hint: one of ["fall", "winter", "spring", "summer", ""]\n'
    "  popularity_hint: number 0.0-1.0\n"
    "  is_core: true if available year-round\n"
    "  is_guest: true if seasonal or limited edition\n"
    "Leave out any field you cannot determine."
)

PASTRY_METADATA_PROMPT = (
    "You are a pastry and bakery expert. Describe the named pastry for a café inventory.\n"
    "Return ONLY a JSON object (no markdown, no explanation) with fields:\n"
    '  flavor_tags: comma-separated descriptors, e.g. "almond, butter, vanilla"\n'
    '  texture_tags: comma-separated descriptors, e.g. "flaky, crispy, buttery"\n'
    "  sweetness: number 1-5 (1=low, 5=very sweet)\n"
    "  richness: number 1-5 (1=light, 5=very rich)\n"
    "  popularity_hint: number 0.0-1.0\n"
    '  allergen_info: common allergens, or "None known"\n'
    "Leave out any field you cannot determine."
)


class MetadataUnavailable(Exception):
    pass


def _default_coffee_metadata(*_args, **_kwargs) -> CoffeeMetadata:
    return CoffeeMetadata()


def _default_pastry_metadata(*_args, **_kwargs) -> PastryMetadata:
    return PastryMetadata()


def coerce_metadata(model: Type[M], data: Dict[str, Any]) -> M:
    """Keep the fields that validate on their own; everything else takes the model default."""
    accepted: Dict[str, Any] = {}

    for field_name in model.model_fields:
        value = data.get(field_name)
        if value is None or value == "":
            continue
        try:
            model.model_validate({field_name: value})
        except ValidationError:
            logger.info(
                "Dropping invalid metadata field",
                extra={"model": model.__name__, "field": field_name, "value": repr(value)}
            )
            continue
        accepted[field_name] = value

    return model.model_validate(accepted)


class MetadataService:
    def __init__(
        self,
        client: Any = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        model: Optional[str] = None,
    ):
        self.client = client if client is not None else get_async_client()
        self.circuit_breaker = circuit_breaker or metadata_circuit_breaker
        self.model = model

    @with_fallback(_default_coffee_metadata)
    async def generate_coffee_metadata(self, coffee_name: str) -> CoffeeMetadata:
        data = await self._request(COFFEE_METADATA_PROMPT, f"Coffee name: {coffee_name}")
        return coerce_metadata(CoffeeMetadata, data)

    @with_fallback(_default_pastry_metadata)
    async def generate_pastry_metadata(self, pastry_name: str) -> PastryMetadata:
        data = await self._request(PASTRY_METADATA_PROMPT, f"Pastry name: {pastry_name}")
        return coerce_metadata(PastryMetadata, data)

    async def _request(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        if self.client is None:
            raise MetadataUnavailable("metadata service not configured")

        content = await self.circuit_breaker.call_async(
            request_completion,
            self.client,
            system_prompt,
            user_prompt,
            temperature=0.3,
            max_tokens=300,
            model=self.model,
        )
        return parse_json_object(content)
