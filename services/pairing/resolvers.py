from typing import Optional, Sequence

from .tables import PairingTables

NEUTRAL_SCORE = 0.5
NO_OVERLAP_SCORE = 0.3
ROAST_FALLBACK_SCORE = 0.7

COMPATIBLE_MATCH = 1.0
EXACT_MATCH = 0.8


def flavor_compatibility_score(
    anchor_tokens: Sequence[str],
    candidate_tokens: Sequence[str],
    tables: PairingTables,
) -> float:
    """Directed overlap of anchor flavors against candidate flavors.

    A table-listed match is worth 1.0 and a literal repeat only 0.8, so two
    items sharing the same word can score below two merely related ones.
    The lookup goes anchor -> candidate only.
    """
    if not anchor_tokens or not candidate_tokens:
        return NEUTRAL_SCORE

    total = 0.0
    matches = 0

    for anchor_token in anchor_tokens:
        compatible = tables.flavor_compatibility.get(anchor_token, frozenset())
        for candidate_token in candidate_tokens:
            if candidate_token in compatible:
                total += COMPATIBLE_MATCH
                matches += 1
            elif anchor_token == candidate_token:
                total += EXACT_MATCH
                matches += 1

    if matches == 0:
        return NO_OVERLAP_SCORE

    return min(total / max(len(anchor_tokens), len(candidate_tokens)), 1.0)


def origin_affinity_score(
    origin: Optional[str],
    candidate_tokens: Sequence[str],
    tables: PairingTables,
) -> float:
    if not origin or not candidate_tokens:
        return NEUTRAL_SCORE

    expected = tables.origin_affinity.get(origin.strip().lower())
    if expected is None:
        # unknown regions are common, not penalised
        return NEUTRAL_SCORE

    matches = sum(1 for token in candidate_tokens if token in expected)

    return min(matches / max(len(expected), 1), 1.0)


def roast_texture_score(
    roast_type: Optional[str],
    texture_tokens: Sequence[str],
    tables: PairingTables,
) -> float:
    if not roast_type or not texture_tokens:
        return NEUTRAL_SCORE

    roast = roast_type.lower()

    if "dark" in roast or "espresso" in roast:
        return _texture_overlap(texture_tokens, tables.dark_roast_textures)

    if "light" in roast or "filter" in roast:
        return _texture_overlap(texture_tokens, tables.light_roast_textures)

    return ROAST_FALLBACK_SCORE


def _texture_overlap(texture_tokens: Sequence[str], preferred) -> float:
    matches = sum(1 for token in texture_tokens if token in preferred)

    if matches == 0:
        return NO_OVERLAP_SCORE

    return min(matches / len(texture_tokens), 1.0)
