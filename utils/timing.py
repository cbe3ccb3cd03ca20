import time
from contextlib import contextmanager
from typing import Dict, Optional

from utils.logger import setup_logger

logger = setup_logger(__name__)


class StageTimer:
    """Wall-clock seconds per named stage of one request (e.g. ``rank``, ``enhance``)."""

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id
        self.stages: Dict[str, float] = {}

    @contextmanager
    def stage(self, name: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            # a repeated stage name accumulates
            self.stages[name] = self.stages.get(name, 0.0) + (time.perf_counter() - start)

    def duration_seconds(self, name: str) -> float:
        return self.stages.get(name, 0.0)

    @property
    def total_seconds(self) -> float:
        return sum(self.stages.values())

    def get_summary(self) -> Dict[str, float]:
        summary = {f"{name}_ms": round(seconds * 1000, 2) for name, seconds in self.stages.items()}
        summary["total_ms"] = round(self.total_seconds * 1000, 2)
        return summary

    def log_summary(self, operation: str, **fields):
        logger.info(
            f"{operation} finished",
            extra={
                "operation": operation,
                "timings": self.get_summary(),
                "correlation_id": self.correlation_id,
                **fields,
            }
        )
