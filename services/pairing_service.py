from __future__ import annotations
from typing import Optional, Sequence

from config.settings import settings
from models import CoffeeItem, PastryItem, ItemRef, PairingResponse, PairingUI, UILayout
from services.narrative import NarrativeEnhancementService
from services.pairing import rank_pairings, PairingTables
from utils.correlation_id import get_correlation_id
from utils.logger import setup_logger
from utils.prometheus_metrics import get_prometheus_metrics
from utils.timing import StageTimer

logger = setup_logger(__name__)

CARDS_NOTES = "Top pairings ranked by the Bunamo score."
EMPTY_NOTES = "No pairings available. Add pastries to your inventory to generate pairings."


class PairingService:
    def __init__(
        self,
        narrative: Optional[NarrativeEnhancementService] = None,
        tables: Optional[PairingTables] = None,
    ):
        self._narrative = narrative
        self.tables = tables

    @property
    def narrative(self) -> NarrativeEnhancementService:
        if self._narrative is None:
            self._narrative = NarrativeEnhancementService()
        return self._narrative

    async def generate_pairings(
        self,
        anchor: CoffeeItem,
        candidates: Sequence[PastryItem],
        top_k: Optional[int] = None,
        enhance: Optional[bool] = None,
    ) -> PairingResponse:
        top_k = settings.PAIRING_TOP_K if top_k is None else top_k
        enhance = settings.NARRATIVE_ENABLED if enhance is None else enhance
        timer = StageTimer(correlation_id=get_correlation_id())

        with timer.stage("rank"):
            ranked = rank_pairings(anchor, candidates, top_k=top_k, tables=self.tables)

        metrics = get_prometheus_metrics()
        if metrics:
            metrics.record_ranking(len(candidates), timer.duration_seconds("rank"))

        coffee_ref = ItemRef(id=anchor.id, name=anchor.name, image=anchor.image_url or "")

        if not ranked:
            logger.info(
                "No pairings available",
                extra={"anchor": anchor.name, "candidates": len(candidates)}
            )
            return PairingResponse(
                coffee=coffee_ref,
                pairs=[],
                ui=PairingUI(layout=UILayout.EMPTY, show_downloads=[], notes=EMPTY_NOTES),
            )

        with timer.stage("enhance"):
            if enhance:
                pairs = await self.narrative.enhance(anchor, ranked)
            else:
                pairs = self.narrative.fallback_all(anchor, ranked)

        timer.log_summary("generate_pairings", anchor=anchor.name, pairs=len(pairs))

        return PairingResponse(
            coffee=coffee_ref,
            pairs=pairs,
            ui=PairingUI(layout=UILayout.CARDS, show_downloads=["pdf"], notes=CARDS_NOTES),
        )

