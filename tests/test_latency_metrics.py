from monitoring.latency_metrics import LatencyCollector, LatencyMetrics


def test_empty_summary():
    summary = LatencyCollector().get_summary()

    assert summary["total"] == {"p50": 0.0, "p95": 0.0, "p99": 0.0}
    assert summary["requests"] == {}


def test_records_percentiles_and_counts():
    collector = LatencyCollector()
    for ms in [10.0, 20.0, 30.0, 40.0]:
        collector.record(LatencyMetrics(kind="chat", total_ms=ms, llm_ms=ms / 2))
    collector.record(LatencyMetrics(kind="refactor", total_ms=50.0, failed=True))

    summary = collector.get_summary()

    assert summary["total"]["min"] == 10.0
    assert summary["total"]["max"] == 50.0
    assert summary["llm"]["max"] == 20.0
    assert summary["requests"] == {"chat": 4, "refactor": 1}
    assert summary["failures"] == {"refactor": 1}


def test_reset():
    collector = LatencyCollector()
    collector.record(LatencyMetrics(kind="chat", total_ms=5.0))

    collector.reset()

    assert collector.get_summary()["requests"] == {}
