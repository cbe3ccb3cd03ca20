from __future__ import annotations
import asyncio
import json
from typing import Any, List, Optional, Sequence

from openai import APIError
from pydantic import ValidationError

from models import (
    CoffeeItem,
    RankedPairing,
    NarrativeFields,
    NarrativeSource,
    EnhancedPairing,
    ItemRef,
)
from services.llm_client import get_async_client, request_completion, parse_json_object, LLMResponseError
from utils.circuit_breaker import CircuitBreaker, CircuitBreakerOpenError, narrative_circuit_breaker
from utils.logger import setup_logger
from utils.prometheus_metrics import get_prometheus_metrics

from .fallback_narrative import FALLBACK_NOTE, DISABLED_NOTE, build_fallback_narrative, build_reasoning

logger = setup_logger(__name__)

NARRATIVE_SYSTEM_PROMPT = (
    "You write short café menu copy for a coffee and pastry pairing. "
    "The pairing score is already decided; never mention or change numbers.\n"
    "Return ONLY a JSON object (no markdown, no explanation) with this exact schema:\n"
    "{\n"
    '  "marketing_tagline": "<catchy line, under 12 words>",\n'
    '  "explanation": "<one or two sentences on why the pair works>",\n'
    '  "flavor_tags": ["<tag>", "<tag>"],\n'
    '  "allergen_info": "<common allergens or null>"\n'
    "}\n"
    "flavor_tags must hold 2 or 3 short tags, using SCA flavor wheel terms where they fit "
    "(e.g. Nutty, Cocoa, Citrus, Floral)."
)


class NarrativeUnavailable(Exception):
    pass


class NarrativeEnhancementService:
    """Decorates ranked pairings with marketing copy. Never touches the scores."""

    def __init__(
        self,
        client: Any = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        model: Optional[str] = None,
    ):
        self.client = client if client is not None else get_async_client()
        self.circuit_breaker = circuit_breaker or narrative_circuit_breaker
        self.model = model

    async def enhance(self, anchor: CoffeeItem, ranked: Sequence[RankedPairing]) -> List[EnhancedPairing]:
        if not ranked:
            return []

        outcomes = await asyncio.gather(
            *(self._enhance_one(anchor, pairing) for pairing in ranked),
            return_exceptions=True,
        )

        enhanced: List[EnhancedPairing] = []
        for pairing, outcome in zip(ranked, outcomes):
            if isinstance(outcome, Exception):
                logger.error(
                    "Unexpected narrative failure, using fallback",
                    extra={"candidate": pairing.candidate.name, "error": repr(outcome)}
                )
                outcome = self._fallback(anchor, pairing)
            elif isinstance(outcome, BaseException):
                raise outcome
            enhanced.append(outcome)

        return enhanced

    def fallback_all(self, anchor: CoffeeItem, ranked: Sequence[RankedPairing]) -> List[EnhancedPairing]:
        return [self._fallback(anchor, pairing, note=DISABLED_NOTE, record=False) for pairing in ranked]

    async def _enhance_one(self, anchor: CoffeeItem, pairing: RankedPairing) -> EnhancedPairing:
        try:
            fields = await self._request_narrative(anchor, pairing)
        except NarrativeUnavailable as e:
            logger.warning(
                "Narrative enhancement failed, using fallback",
                extra={"candidate": pairing.candidate.name, "reason": str(e)}
            )
            return self._fallback(anchor, pairing)

        self._record(NarrativeSource.MODEL)
        return self._assemble(pairing, fields, NarrativeSource.MODEL)

    async def _request_narrative(self, anchor: CoffeeItem, pairing: RankedPairing) -> NarrativeFields:
        if self.client is None:
            raise NarrativeUnavailable("narrative service not configured")

        try:
            content = await self.circuit_breaker.call_async(
                request_completion,
                self.client,
                NARRATIVE_SYSTEM_PROMPT,
                self._build_prompt(anchor, pairing),
                temperature=0.7,
                max_tokens=250,
                model=self.model,
            )
        except CircuitBreakerOpenError as e:
            raise NarrativeUnavailable("narrative circuit is open") from e
        except APIError as e:
            raise NarrativeUnavailable(f"narrative request failed: {e.__class__.__name__}") from e

        try:
            return NarrativeFields.model_validate(parse_json_object(content))
        except LLMResponseError as e:
            raise NarrativeUnavailable(str(e)) from e
        except ValidationError as e:
            raise NarrativeUnavailable(f"narrative response has unexpected shape ({e.error_count()} errors)") from e

    def _build_prompt(self, anchor: CoffeeItem, pairing: RankedPairing) -> str:
        candidate = pairing.candidate
        context = {
            "coffee": {
                "name": anchor.name,
                "flavor_notes": anchor.flavor_notes,
                "origin": anchor.origin,
                "roast_type": anchor.roast_type,
                "acidity": anchor.acidity,
                "season_hint": anchor.season_hint,
            },
            "pastry": {
                "name": candidate.name,
                "flavor_tags": candidate.flavor_tags,
                "texture_tags": candidate.texture_tags,
                "sweetness": candidate.sweetness,
                "richness": candidate.richness,
                "allergen_info": candidate.allergen_info,
            },
            "score_breakdown": {
                key: round(value, 3) for key, value in pairing.score.breakdown.model_dump().items()
            },
        }
        return "Write copy for this pairing:\n" + json.dumps(context, ensure_ascii=False)

    def _fallback(
        self,
        anchor: CoffeeItem,
        pairing: RankedPairing,
        note: str = FALLBACK_NOTE,
        record: bool = True,
    ) -> EnhancedPairing:
        fields = build_fallback_narrative(anchor.name, pairing.candidate.name, pairing.score.breakdown)
        if record:
            self._record(NarrativeSource.FALLBACK)
        return self._assemble(pairing, fields, NarrativeSource.FALLBACK, fallback_note=note)

    def _assemble(
        self,
        pairing: RankedPairing,
        fields: NarrativeFields,
        source: NarrativeSource,
        fallback_note: Optional[str] = None,
    ) -> EnhancedPairing:
        candidate = pairing.candidate
        return EnhancedPairing(
            pastry=ItemRef(id=candidate.id, name=candidate.name, image=candidate.image_url or ""),
            score=pairing.score.overall,
            score_breakdown=pairing.score.breakdown,
            reasoning=build_reasoning(pairing.score.breakdown),
            why_marketing=fields.marketing_tagline,
            explanation=fields.explanation,
            flavor_tags_standardized=fields.flavor_tags,
            allergen_info=fields.allergen_info or candidate.allergen_info,
            narrative_source=source,
            fallback_note=fallback_note,
            engine_explanation=pairing.score.explanation,
        )

    def _record(self, source: NarrativeSource):
        metrics = get_prometheus_metrics()
        if metrics:
            metrics.record_narrative(source.value)
