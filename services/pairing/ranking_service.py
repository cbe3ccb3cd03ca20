from typing import List, Optional, Sequence

from models import CoffeeItem, PastryItem, RankedPairing, RankedCoffee
from utils.logger import setup_logger

from .scoring_service import PairingScoringService
from .tables import PairingTables

logger = setup_logger(__name__)

DEFAULT_TOP_K = 3


def rank_pairings(
    anchor: CoffeeItem,
    candidates: Sequence[PastryItem],
    top_k: int = DEFAULT_TOP_K,
    tables: Optional[PairingTables] = None,
) -> List[RankedPairing]:
    """Score every pastry against one coffee and keep the best ``top_k``.

    Ties keep the input order (``sorted`` is stable). No candidates means an
    empty list, not an error.
    """
    if not candidates or top_k <= 0:
        return []

    scorer = PairingScoringService(tables)
    scored = [RankedPairing(candidate=c, score=scorer.score(anchor, c)) for c in candidates]
    ranked = sorted(scored, key=lambda r: r.score.overall, reverse=True)[:top_k]

    logger.info(
        "Pairings ranked",
        extra={
            "anchor": anchor.name,
            "candidates": len(candidates),
            "returned": len(ranked),
            "top_score": round(ranked[0].score.overall, 3),
        }
    )

    return ranked


def rank_coffees_for_pastry(
    pastry: PastryItem,
    coffees: Sequence[CoffeeItem],
    top_k: int = DEFAULT_TOP_K,
    tables: Optional[PairingTables] = None,
) -> List[RankedCoffee]:
    """Reverse lookup: each coffee stays the anchor, the pastry is fixed."""
    if not coffees or top_k <= 0:
        return []

    scorer = PairingScoringService(tables)
    scored = [RankedCoffee(coffee=c, score=scorer.score(c, pastry)) for c in coffees]
    ranked = sorted(scored, key=lambda r: r.score.overall, reverse=True)[:top_k]

    logger.info(
        "Coffees ranked for pastry",
        extra={
            "pastry": pastry.name,
            "coffees": len(coffees),
            "returned": len(ranked),
        }
    )

    return ranked
