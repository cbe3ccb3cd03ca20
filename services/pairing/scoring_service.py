from typing import List, Optional

from models import CoffeeItem, PastryItem, CompositeScore, ScoreBreakdown
from utils.logger import setup_logger

from .calculators import acidity_balance_score, popularity_score, seasonal_multiplier
from .resolvers import flavor_compatibility_score, origin_affinity_score, roast_texture_score
from .tables import PairingTables, get_pairing_tables
from .vocabulary import normalize_tokens

logger = setup_logger(__name__)

WEIGHT_FLAVOR = 0.45
WEIGHT_ORIGIN = 0.20
WEIGHT_ACIDITY = 0.20
WEIGHT_ROAST_TEXTURE = 0.10
WEIGHT_POPULARITY = 0.05


class PairingScoringService:
    """Scores one coffee/pastry pair against the static tables. Stateless apart from the tables."""

    def __init__(self, tables: Optional[PairingTables] = None):
        self.tables = tables or get_pairing_tables()

    def score(self, anchor: CoffeeItem, candidate: PastryItem) -> CompositeScore:
        anchor_flavors = normalize_tokens(anchor.flavor_notes)
        candidate_flavors = normalize_tokens(candidate.flavor_tags)
        candidate_textures = normalize_tokens(candidate.texture_tags)

        breakdown = ScoreBreakdown(
            flavor=flavor_compatibility_score(anchor_flavors, candidate_flavors, self.tables),
            origin=origin_affinity_score(anchor.origin, candidate_flavors, self.tables),
            acidity=acidity_balance_score(anchor.acidity, candidate.sweetness, candidate.richness),
            roast_texture=roast_texture_score(anchor.roast_type, candidate_textures, self.tables),
            popularity=popularity_score(anchor.popularity_hint, candidate.popularity_hint, self.tables),
            seasonal_multiplier=seasonal_multiplier(anchor.season_hint, self.tables),
        )

        overall = self._clamp(self._weighted_total(breakdown) * breakdown.seasonal_multiplier)
        balance = self._balance_score(breakdown.flavor, breakdown.roast_texture)
        complexity = self._complexity_score(anchor_flavors, candidate_flavors)

        result = CompositeScore(
            overall=overall,
            breakdown=breakdown,
            balance=balance,
            complexity=complexity,
            explanation=self._explain(breakdown, balance, anchor.origin),
        )

        logger.debug(
            "Pair scored",
            extra={
                "anchor": anchor.name,
                "candidate": candidate.name,
                "overall": round(overall, 3),
                "breakdown": breakdown.model_dump(),
            }
        )

        return result

    def _weighted_total(self, breakdown: ScoreBreakdown) -> float:
        return (
            breakdown.flavor * WEIGHT_FLAVOR
            + breakdown.origin * WEIGHT_ORIGIN
            + breakdown.acidity * WEIGHT_ACIDITY
            + breakdown.roast_texture * WEIGHT_ROAST_TEXTURE
            + breakdown.popularity * WEIGHT_POPULARITY
        )

    def _clamp(self, value: float) -> float:
        return max(0.0, min(1.0, value))

    def _balance_score(self, flavor: float, roast_texture: float) -> float:
        # explanatory only, not part of the weighted total
        average = (flavor + roast_texture) / 2
        return average * (1 - abs(flavor - roast_texture))

    def _complexity_score(self, anchor_flavors: List[str], candidate_flavors: List[str]) -> float:
        total = len(anchor_flavors) + len(candidate_flavors)
        if total <= 2:
            return 0.6
        if total >= 8:
            return 0.8
        return 0.7

    def _explain(self, breakdown: ScoreBreakdown, balance: float, origin: Optional[str]) -> str:
        parts = []

        if breakdown.flavor > 0.8:
            parts.append("Excellent flavor harmony between coffee and pastry")
        elif breakdown.flavor > 0.6:
            parts.append("Good flavor compatibility")
        else:
            parts.append("Flavor profiles may not complement each other well")

        if breakdown.origin > 0.7 and origin:
            parts.append(f"The pastry echoes classic {origin.strip().title()} origin notes")

        if breakdown.acidity >= 0.8:
            parts.append("Acidity and richness are well balanced")
        elif breakdown.acidity < 0.6:
            parts.append("Acidity and richness pull in different directions")

        if breakdown.roast_texture > 0.8:
            parts.append("Texture suits the roast")
        elif breakdown.roast_texture < 0.4:
            parts.append("Texture pairing could be improved")

        if breakdown.popularity > 1.0:
            parts.append("Popular combination")

        if breakdown.seasonal_multiplier > 1.0:
            parts.append("Seasonally enhanced pairing")
        elif breakdown.seasonal_multiplier < 1.0:
            parts.append("Less suited to the current season")

        if balance > 0.8:
            parts.append("Well-balanced pairing")

        return ". ".join(parts) + "."


def calculate_pairing_score(
    anchor: CoffeeItem,
    candidate: PastryItem,
    tables: Optional[PairingTables] = None,
) -> CompositeScore:
    return PairingScoringService(tables).score(anchor, candidate)
