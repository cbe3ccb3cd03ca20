from .vocabulary import normalize_tokens
from .tables import PairingTables, build_pairing_tables, load_pairing_tables, get_pairing_tables
from .resolvers import flavor_compatibility_score, origin_affinity_score, roast_texture_score
from .calculators import acidity_balance_score, popularity_score, seasonal_multiplier
from .scoring_service import PairingScoringService, calculate_pairing_score
from .ranking_service import rank_pairings, rank_coffees_for_pastry, DEFAULT_TOP_K

__all__ = [
    "normalize_tokens",
    "PairingTables",
    "build_pairing_tables",
    "load_pairing_tables",
    "get_pairing_tables",
    "flavor_compatibility_score",
    "origin_affinity_score",
    "roast_texture_score",
    "acidity_balance_score",
    "popularity_score",
    "seasonal_multiplier",
    "PairingScoringService",
    "calculate_pairing_score",
    "rank_pairings",
    "rank_coffees_for_pastry",
    "DEFAULT_TOP_K",
]
