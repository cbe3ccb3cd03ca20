from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CoffeeMetadata(BaseModel):
    roast_type: str = "Medium"
    preparation: str = ""
    sort_blend: str = ""
    origin: str = ""
    acidity: float = Field(3, ge=1, le=5)
    flavor_notes: str = ""
    season_hint: str = ""
    popularity_hint: float = Field(0.5, ge=0.0, le=1.0)
    is_core: bool = True
    is_guest: bool = False

    @field_validator("roast_type", mode="before")
    @classmethod
    def _default_roast(cls, value: Optional[str]) -> str:
        return value or "Medium"


class PastryMetadata(BaseModel):
    flavor_tags: str = ""
    texture_tags: str = ""
    sweetness: float = Field(3, ge=1, le=5)
    richness: float = Field(3, ge=1, le=5)
    popularity_hint: float = Field(0.6, ge=0.0, le=1.0)
    allergen_info: str = ""
