from __future__ import annotations

import pytest

from taglog.appenders import MemoryAppender
from taglog.core.dispatcher import Dispatcher
from taglog.core.events import LogEvent
from taglog.core.levels import LogLevel
from taglog.metrics import DispatcherMetrics, MetricsCollector


def test_disabled_collector_still_counts() -> None:
    metrics = MetricsCollector()

    metrics.record_event_submitted()
    metrics.record_event_submitted()
    metrics.record_event_delivered(appenders=["memory"], duration_seconds=0.001)
    metrics.record_event_dropped()
    metrics.record_appender_error(appender="memory")

    assert metrics.is_enabled is False
    assert metrics.registry is None
    assert metrics.snapshot() == DispatcherMetrics(
        events_submitted=2,
        events_dropped=1,
        events_delivered=1,
        appender_errors=1,
    )
    assert metrics.snapshot().backlog == 1


def test_enabled_collector_exports_samples() -> None:
    metrics = MetricsCollector(enabled=True)

    metrics.record_event_submitted()
    metrics.record_event_dropped()
    metrics.record_event_delivered(appenders=["a", "b"], duration_seconds=0.002)
    metrics.record_appender_error()

    registry = metrics.registry
    assert registry is not None
    assert registry.get_sample_value("taglog_events_submitted_total") == 1.0
    assert registry.get_sample_value("taglog_events_dropped_total") == 1.0
    assert (
        registry.get_sample_value("taglog_appender_writes_total", {"appender": "b"})
        == 1.0
    )
    assert (
        registry.get_sample_value(
            "taglog_appender_errors_total", {"appender": "unknown"}
        )
        == 1.0
    )
    assert registry.get_sample_value("taglog_event_fanout_seconds_count") == 1.0


def test_collectors_use_isolated_registries() -> None:
    first = MetricsCollector(enabled=True)
    second = MetricsCollector(enabled=True)

    first.record_event_submitted()

    assert second.registry is not None
    assert second.registry.get_sample_value("taglog_events_submitted_total") == 0.0


def test_dispatcher_metrics_enabled_from_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("TAGLOG_CORE__ENABLE_METRICS", "true")
    dispatcher = Dispatcher()
    try:
        dispatcher.add_appender(MemoryAppender())
        dispatcher.submit(LogEvent.create(LogLevel.INFO, "counted"))
        dispatcher.wait_for_incoming()

        registry = dispatcher.metrics.registry
        assert registry is not None
        assert (
            registry.get_sample_value(
                "taglog_appender_writes_total", {"appender": "memory"}
            )
            == 1.0
        )
        assert dispatcher.metrics.snapshot().backlog == 0
    finally:
        dispatcher.pause_logging(timeout=5.0)
