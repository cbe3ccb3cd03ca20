from .menu import CoffeeItem, PastryItem
from .pairing import (
    ScoreBreakdown,
    CompositeScore,
    RankedPairing,
    RankedCoffee,
    NarrativeSource,
    NarrativeFields,
    ItemRef,
    EnhancedPairing,
    UILayout,
    PairingUI,
    PairingResponse,
)
from .metadata import CoffeeMetadata, PastryMetadata
