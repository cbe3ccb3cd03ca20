from typing import Optional

from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST

from utils.logger import setup_logger

logger = setup_logger(__name__)

# rankings are pure CPU over a handful of candidates; sub-millisecond is normal
RANKING_BUCKETS = (0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25)


class PairingMetrics:
    """Owns its own registry; one instance per app startup."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.registry: Optional[CollectorRegistry] = None

        if enabled:
            self.registry = CollectorRegistry()
            self._register(self.registry)
            logger.info("Prometheus metrics enabled")

    def _register(self, registry: CollectorRegistry):
        self.requests = Counter(
            "bunamo_requests_total", "HTTP requests", ["method", "endpoint", "status"], registry=registry
        )
        self.request_seconds = Histogram(
            "bunamo_request_duration_seconds", "HTTP request latency", ["method", "endpoint"], registry=registry
        )
        self.rankings = Counter(
            "bunamo_rankings_total", "Pairing rankings produced", registry=registry
        )
        self.candidates_scored = Counter(
            "bunamo_candidates_scored_total", "Candidate pastries scored", registry=registry
        )
        self.ranking_seconds = Histogram(
            "bunamo_ranking_duration_seconds", "Score-and-sort latency", buckets=RANKING_BUCKETS, registry=registry
        )
        self.narratives = Counter(
            "bunamo_narratives_total", "Narrative results by source", ["source"], registry=registry
        )

    def record_request(self, method: str, endpoint: str, status: int, duration_seconds: float):
        if not self.enabled:
            return
        self.requests.labels(method=method, endpoint=endpoint, status=str(status)).inc()
        self.request_seconds.labels(method=method, endpoint=endpoint).observe(duration_seconds)

    def record_ranking(self, candidate_count: int, duration_seconds: float):
        if not self.enabled:
            return
        self.rankings.inc()
        self.candidates_scored.inc(candidate_count)
        self.ranking_seconds.observe(duration_seconds)

    def record_narrative(self, source: str):
        if not self.enabled:
            return
        self.narratives.labels(source=source).inc()

    def generate_metrics(self) -> bytes:
        if not self.enabled:
            return b""
        return generate_latest(self.registry)

    def get_content_type(self) -> str:
        return CONTENT_TYPE_LATEST if self.enabled else "text/plain"


_metrics: Optional[PairingMetrics] = None


def init_prometheus_metrics(enabled: bool = False) -> PairingMetrics:
    global _metrics
    _metrics = PairingMetrics(enabled=enabled)
    return _metrics


def get_prometheus_metrics() -> Optional[PairingMetrics]:
    return _metrics
