import math
from typing import Optional

from .tables import PairingTables

DEFAULT_LEVEL = 3.0


def acidity_balance_score(
    acidity: Optional[float],
    sweetness: Optional[float],
    richness: Optional[float],
) -> float:
    """Bucketed fit between the coffee's acidity and the pastry's sweetness/richness (1-5 scales)."""
    acidity = DEFAULT_LEVEL if acidity is None else acidity
    sweetness = DEFAULT_LEVEL if sweetness is None else sweetness
    richness = DEFAULT_LEVEL if richness is None else richness

    if acidity >= 4:
        if sweetness >= 4 and richness >= 3:
            return 1.0
        if sweetness >= 3 and richness >= 3:
            return 0.8
        if sweetness >= 2:
            return 0.6
        return 0.4

    if acidity == 3:
        return 0.9

    if acidity <= 2:
        if richness >= 4:
            return 1.0
        if richness >= 3:
            return 0.8
        if richness >= 2:
            return 0.6
        return 0.4

    # fractional acidity between the buckets
    return 0.7


def round_popularity(anchor_hint: float, candidate_hint: float) -> float:
    # half-up to one decimal; round() would use banker's rounding
    average = (anchor_hint + candidate_hint) / 2
    return math.floor(average * 10 + 0.5) / 10


def popularity_score(anchor_hint: float, candidate_hint: float, tables: PairingTables) -> float:
    """Rescaled popularity multiplier. Can exceed 1.0; the composite clamp absorbs it."""
    rounded = round_popularity(anchor_hint, candidate_hint)
    multiplier = tables.popularity_factors.get(rounded, 1.0)

    return multiplier * 0.5 + 0.5


def seasonal_multiplier(season_hint: Optional[str], tables: PairingTables) -> float:
    if not season_hint:
        return 1.0

    return tables.seasonal_factors.get(season_hint.strip().lower(), 1.0)
