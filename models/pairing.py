from typing import Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, Field, computed_field, field_validator

from .menu import CoffeeItem, PastryItem


class ScoreBreakdown(BaseModel):
    flavor: float
    origin: float
    acidity: float
    roast_texture: float
    # may exceed 1.0 before the composite clamp
    popularity: float
    seasonal_multiplier: float

    @computed_field
    @property
    def texture(self) -> float:
        return self.roast_texture

    @computed_field
    @property
    def seasonal(self) -> float:
        return self.seasonal_multiplier


class CompositeScore(BaseModel):
    overall: float = Field(..., ge=0.0, le=1.0)
    breakdown: ScoreBreakdown
    balance: float
    complexity: float
    explanation: str


class RankedPairing(BaseModel):
    candidate: PastryItem
    score: CompositeScore


class RankedCoffee(BaseModel):
    coffee: CoffeeItem
    score: CompositeScore


class NarrativeSource(str, Enum):
    MODEL = "model"
    FALLBACK = "fallback"


class NarrativeFields(BaseModel):
    """Shape the narrative service must return; anything else is rejected."""

    marketing_tagline: str = Field(..., min_length=1)
    explanation: str = Field(..., min_length=1)
    flavor_tags: List[str] = Field(..., min_length=2, max_length=3)
    allergen_info: Optional[str] = None

    @field_validator("marketing_tagline", "explanation")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("flavor_tags")
    @classmethod
    def _clean_tags(cls, value: List[str]) -> List[str]:
        cleaned = [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]
        if len(cleaned) < 2:
            raise ValueError("need at least two non-empty flavor tags")
        return cleaned


class ItemRef(BaseModel):
    id: Optional[str] = None
    name: str
    image: str = ""


class EnhancedPairing(BaseModel):
    pastry: ItemRef
    score: float
    score_breakdown: ScoreBreakdown
    reasoning: Dict[str, str]
    why_marketing: str
    explanation: str
    flavor_tags_standardized: List[str]
    allergen_info: Optional[str] = None
    narrative_source: NarrativeSource
    fallback_note: Optional[str] = None
    engine_explanation: str


class UILayout(str, Enum):
    CARDS = "cards"
    EMPTY = "empty"


class PairingUI(BaseModel):
    layout: UILayout
    show_downloads: List[str] = Field(default_factory=list)
    notes: str


class PairingResponse(BaseModel):
    coffee: ItemRef
    pairs: List[EnhancedPairing] = Field(default_factory=list)
    ui: PairingUI
