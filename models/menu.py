from typing import Optional
from pydantic import BaseModel, Field


class CoffeeItem(BaseModel):
    """Anchor record. Only the scoring fields matter to the engine."""

    id: Optional[str] = None
    name: str = ""
    flavor_notes: Optional[str] = Field(None, description="Free-text flavor notes, comma/semicolon/pipe/ampersand separated")
    season_hint: Optional[str] = None
    popularity_hint: float = Field(..., ge=0.0, le=1.0)
    origin: Optional[str] = None
    acidity: Optional[float] = Field(None, description="1 (low) to 5 (high)")
    roast_type: Optional[str] = None
    is_core: bool = True
    is_guest: bool = False
    image_url: Optional[str] = None


class PastryItem(BaseModel):
    """Candidate record."""

    id: Optional[str] = None
    name: str = ""
    flavor_tags: Optional[str] = None
    texture_tags: Optional[str] = None
    popularity_hint: float = Field(..., ge=0.0, le=1.0)
    sweetness: Optional[float] = Field(None, description="1 (low) to 5 (very sweet)")
    richness: Optional[float] = Field(None, description="1 (light) to 5 (very rich)")
    allergen_info: Optional[str] = None
    image_url: Optional[str] = None
