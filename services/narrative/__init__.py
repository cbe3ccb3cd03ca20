from .narrative_service import NarrativeEnhancementService, NarrativeUnavailable, NARRATIVE_SYSTEM_PROMPT
from .fallback_narrative import FALLBACK_NOTE, DISABLED_NOTE, build_fallback_narrative, build_reasoning

__all__ = [
    "NarrativeEnhancementService",
    "NarrativeUnavailable",
    "NARRATIVE_SYSTEM_PROMPT",
    "FALLBACK_NOTE",
    "DISABLED_NOTE",
    "build_fallback_narrative",
    "build_reasoning",
]
