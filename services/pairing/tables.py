from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional

from config.config_loader import load_validated_config
from config.settings import settings
from utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class PairingTables:
    flavor_compatibility: Mapping[str, FrozenSet[str]]
    origin_affinity: Mapping[str, FrozenSet[str]]
    dark_roast_textures: FrozenSet[str]
    light_roast_textures: FrozenSet[str]
    seasonal_factors: Mapping[str, float]
    popularity_factors: Mapping[float, float]


def _token_set(values) -> FrozenSet[str]:
    return frozenset(str(v).strip().lower() for v in values if str(v).strip())


def build_pairing_tables(config: Dict[str, Any]) -> PairingTables:
    roast = config["roast_textures"]

    return PairingTables(
        flavor_compatibility=MappingProxyType({
            str(token).strip().lower(): _token_set(compatible)
            for token, compatible in config["flavor_compatibility"].items()
        }),
        origin_affinity=MappingProxyType({
            str(origin).strip().lower(): _token_set(expected)
            for origin, expected in config["origin_affinity"].items()
        }),
        dark_roast_textures=_token_set(roast["dark"]),
        light_roast_textures=_token_set(roast["light"]),
        seasonal_factors=MappingProxyType({
            str(season).strip().lower(): float(multiplier)
            for season, multiplier in config["seasonal_factors"].items()
        }),
        popularity_factors=MappingProxyType({
            round(float(key), 1): float(multiplier)
            for key, multiplier in config["popularity_factors"].items()
        }),
    )


def load_pairing_tables(path: Optional[Path] = None) -> PairingTables:
    config = load_validated_config(path)
    tables = build_pairing_tables(config)

    logger.info(
        "Pairing tables built",
        extra={
            "flavor_entries": len(tables.flavor_compatibility),
            "origins": len(tables.origin_affinity),
            "seasons": len(tables.seasonal_factors),
            "popularity_keys": len(tables.popularity_factors),
        }
    )

    return tables


@lru_cache(maxsize=1)
def get_pairing_tables() -> PairingTables:
    path = Path(settings.PAIRING_TABLES_PATH) if settings.PAIRING_TABLES_PATH else None
    return load_pairing_tables(path)
