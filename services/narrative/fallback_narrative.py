from typing import Dict, List

from models import ScoreBreakdown, NarrativeFields

FALLBACK_NOTE = "Narrative service unavailable, showing score-based rationale."
DISABLED_NOTE = "Narrative enhancement is off, showing score-based rationale."


def flavor_band(score: float) -> str:
    if score > 0.8:
        return "exceptional"
    if score > 0.6:
        return "strong"
    if score >= 0.5:
        return "gentle"
    return "contrasting"


def texture_band(score: float) -> str:
    if score > 0.8:
        return "ideal"
    if score >= 0.6:
        return "pleasant"
    if score >= 0.5:
        return "easygoing"
    return "contrasting"


def build_fallback_narrative(coffee_name: str, pastry_name: str, breakdown: ScoreBreakdown) -> NarrativeFields:
    """Template copy from the breakdown and item names only. Deterministic."""
    coffee = coffee_name or "This coffee"
    pastry = pastry_name or "this pastry"

    flavor = flavor_band(breakdown.flavor)
    texture = texture_band(breakdown.roast_texture)

    tags: List[str] = [f"{flavor.title()} Flavor", f"{texture.title()} Texture"]
    if breakdown.seasonal_multiplier > 1.0:
        tags.append("Seasonal")

    return NarrativeFields(
        marketing_tagline=f"{coffee} meets {pastry}",
        explanation=(
            f"{flavor.capitalize()} flavor match ({breakdown.flavor:.2f}) "
            f"with {texture} texture harmony ({breakdown.roast_texture:.2f})."
        ),
        flavor_tags=tags,
    )


def build_reasoning(breakdown: ScoreBreakdown) -> Dict[str, str]:
    """One sentence per component, shown under "why you're seeing this"."""
    reasoning = {
        "flavor": f"Flavor notes line up at a {flavor_band(breakdown.flavor)} level ({breakdown.flavor:.2f}).",
        "texture": f"The pastry's texture is a {texture_band(breakdown.roast_texture)} fit for the roast ({breakdown.roast_texture:.2f}).",
    }

    if breakdown.popularity > 1.0:
        reasoning["popularity"] = "Both items are customer favourites."
    elif breakdown.popularity < 1.0:
        reasoning["popularity"] = "A less common pick, worth suggesting to curious guests."
    else:
        reasoning["popularity"] = "Popularity is neutral for this pair."

    if breakdown.seasonal_multiplier > 1.0:
        reasoning["season"] = "The coffee is in season right now."
    elif breakdown.seasonal_multiplier < 1.0:
        reasoning["season"] = "The coffee is out of its best season."
    else:
        reasoning["season"] = "No seasonal adjustment applies."

    return reasoning
