from __future__ import annotations
from fastapi import APIRouter, Depends
from typing import List, Optional
from pydantic import BaseModel, Field

from config.settings import settings
from models import (
    CoffeeItem,
    PastryItem,
    CompositeScore,
    PairingResponse,
    RankedCoffee,
    CoffeeMetadata,
    PastryMetadata,
)
from services.metadata_service import MetadataService
from services.pairing import calculate_pairing_score, rank_coffees_for_pastry
from services.pairing_service import PairingService


router = APIRouter()


class PairingRequest(BaseModel):
    anchor: CoffeeItem
    candidates: List[PastryItem] = Field(default_factory=list)
    top_k: Optional[int] = Field(None, ge=1, le=20)
    enhance: Optional[bool] = None


class ScoreRequest(BaseModel):
    anchor: CoffeeItem
    candidate: PastryItem


class ReversePairingRequest(BaseModel):
    pastry: PastryItem
    coffees: List[CoffeeItem] = Field(default_factory=list)
    top_k: Optional[int] = Field(None, ge=1, le=20)


class MetadataRequest(BaseModel):
    name: str = Field(..., min_length=1)


def get_pairing_service() -> PairingService:
    return PairingService()


def get_metadata_service() -> MetadataService:
    return MetadataService()


@router.get("/health")
def health():
    return {"status": "ok", "version": "0.1.0"}


@router.post("/pairings", response_model=PairingResponse)
async def create_pairings(body: PairingRequest, service: PairingService = Depends(get_pairing_service)):
    return await service.generate_pairings(body.anchor, body.candidates, top_k=body.top_k, enhance=body.enhance)


@router.post("/pairings/score", response_model=CompositeScore)
def score_pairing(body: ScoreRequest):
    return calculate_pairing_score(body.anchor, body.candidate)


@router.post("/pairings/reverse", response_model=List[RankedCoffee])
def reverse_pairings(body: ReversePairingRequest):
    return rank_coffees_for_pastry(body.pastry, body.coffees, top_k=body.top_k or settings.PAIRING_TOP_K)


@router.post("/metadata/coffee", response_model=CoffeeMetadata)
async def coffee_metadata(body: MetadataRequest, service: MetadataService = Depends(get_metadata_service)):
    return await service.generate_coffee_metadata(body.name.strip())


@router.post("/metadata/pastry", response_model=PastryMetadata)
async def pastry_metadata(body: MetadataRequest, service: MetadataService = Depends(get_metadata_service)):
    return await service.generate_pastry_metadata(body.name.strip())
