import json
import logging

from utils.correlation_id import (
    CorrelationIdFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from utils.logger import JsonFormatter
from utils.prometheus_metrics import PairingMetrics
from utils.timing import StageTimer


def test_json_formatter_includes_extras():
    record = logging.LogRecord("pairing", logging.INFO, __file__, 1, "Pairings ranked", None, None)
    record.candidates = 4
    record.tokens = frozenset({"almond"})

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "Pairings ranked"
    assert data["level"] == "INFO"
    assert data["candidates"] == 4
    assert "almond" in data["tokens"]


def test_stage_timer_records_each_stage():
    timer = StageTimer(correlation_id="abc")

    with timer.stage("rank"):
        pass
    with timer.stage("enhance"):
        pass

    summary = timer.get_summary()
    assert set(summary) == {"rank_ms", "enhance_ms", "total_ms"}
    assert timer.total_seconds >= timer.duration_seconds("rank")
    assert timer.duration_seconds("rank") >= 0.0
    assert timer.duration_seconds("missing") == 0.0


def test_correlation_id_lifecycle():
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"

    clear_correlation_id()
    generated = get_correlation_id()
    assert generated and generated != "req-1"
    clear_correlation_id()


def test_metrics_export():
    metrics = PairingMetrics(enabled=True)
    metrics.record_ranking(4, 0.002)
    metrics.record_narrative("fallback")
    metrics.record_request("POST", "/api/v1/pairings", 200, 0.01)

    output = metrics.generate_metrics().decode()

    assert "bunamo_candidates_scored_total 4.0" in output
    assert 'bunamo_narratives_total{source="fallback"} 1.0' in output


def test_disabled_metrics_are_inert():
    metrics = PairingMetrics(enabled=False)
    metrics.record_ranking(4, 0.002)

    assert metrics.generate_metrics() == b""


def test_filter_stamps_active_correlation_id():
    set_correlation_id("req-42")
    record = logging.LogRecord("pairing", logging.INFO, __file__, 1, "Pair scored", None, None)

    CorrelationIdFilter().filter(record)
    clear_correlation_id()

    assert record.correlation_id == "req-42"


def test_filter_keeps_explicit_correlation_id():
    set_correlation_id("req-42")
    record = logging.LogRecord("pairing", logging.INFO, __file__, 1, "Pair scored", None, None)
    record.correlation_id = "explicit"

    CorrelationIdFilter().filter(record)
    clear_correlation_id()

    assert record.correlation_id == "explicit"
