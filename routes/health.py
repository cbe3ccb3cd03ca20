from fastapi import APIRouter
from datetime import datetime, timezone
from typing import Dict, Any

from config.settings import settings
from services.pairing import get_pairing_tables
from utils.circuit_breaker import narrative_circuit_breaker, metadata_circuit_breaker, CircuitState
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/ready")
def readiness_check():
    checks_passed = True
    checks: Dict[str, Any] = {}

    try:
        tables = get_pairing_tables()
        checks["pairing_tables"] = {
            "status": "ready",
            "flavor_entries": len(tables.flavor_compatibility),
            "origins": len(tables.origin_affinity),
        }
    except Exception as e:
        logger.error("Pairing tables failed to load", extra={"error": str(e)})
        checks["pairing_tables"] = {"status": "not_ready", "error": str(e)}
        checks_passed = False

    # narrative outages degrade to fallback copy, so they never fail readiness
    checks["narrative"] = {
        "configured": bool(settings.OPENAI_API_KEY) and settings.NARRATIVE_ENABLED,
        "degraded": narrative_circuit_breaker.state == CircuitState.OPEN,
        "circuit_breaker": narrative_circuit_breaker.get_state(),
    }
    checks["metadata"] = {
        "circuit_breaker": metadata_circuit_breaker.get_state(),
    }

    return {
        "ready": checks_passed,
        "checks": checks,
        "timestamp": _now()
    }


@router.get("/live")
def liveness_check():
    return {
        "alive": True,
        "timestamp": _now()
    }
