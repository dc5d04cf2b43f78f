"""
Dispatcher metrics for taglog.

Implements a small set of Prometheus-compatible counters and a fan-out
latency histogram, plus in-memory counters that are always kept so tests and
operators can read them without an exporter.

Design goals:
- Safe to call from any thread (callers submit, the worker delivers)
- Zero global registration; each collector owns an isolated registry
- Cheap no-op exporter path when metrics are disabled by settings
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram


@dataclass
class DispatcherMetrics:
    """Captured runtime counters for quick assertions in tests."""

    events_submitted: int = 0
    events_dropped: int = 0
    events_delivered: int = 0
    appender_errors: int = 0

    @property
    def backlog(self) -> int:
        """Events accepted but not yet fanned out (approximate)."""
        return max(0, self.events_submitted - self.events_delivered)


class MetricsCollector:
    """Thread-safe dispatcher metrics collector.

    ``events_delivered`` counts events the worker finished fanning out, not
    individual appender writes; per-appender writes are only exported to
    Prometheus.
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = bool(enabled)
        self._lock = threading.Lock()
        self._state = DispatcherMetrics()

        self._c_submitted: Any | None = None
        self._c_dropped: Any | None = None
        self._c_writes: Any | None = None
        self._c_appender_errors: Any | None = None
        self._h_fanout_latency: Any | None = None
        self._registry: CollectorRegistry | None = None

        if self._enabled:
            # Isolated registry to avoid global duplication in tests
            self._registry = CollectorRegistry()
            self._c_submitted = Counter(
                "taglog_events_submitted_total",
                "Total number of events accepted by the dispatcher",
                registry=self._registry,
            )
            self._c_dropped = Counter(
                "taglog_events_dropped_total",
                "Total number of events dropped because logging was paused",
                registry=self._registry,
            )
            self._c_writes = Counter(
                "taglog_appender_writes_total",
                "Total number of events handed to each appender",
                ["appender"],
                registry=self._registry,
            )
            self._c_appender_errors = Counter(
                "taglog_appender_errors_total",
                "Total number of appender failures contained by the worker",
                ["appender"],
                registry=self._registry,
            )
            self._h_fanout_latency = Histogram(
                "taglog_event_fanout_seconds",
                "Latency for offering a single event to every appender",
                buckets=(
                    0.0001,
                    0.0005,
                    0.001,
                    0.0025,
                    0.005,
                    0.01,
                    0.025,
                    0.05,
                    0.1,
                    0.25,
                    1.0,
                ),
                registry=self._registry,
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> CollectorRegistry | None:
        """Expose the isolated Prometheus registry when enabled."""
        return self._registry

    def record_event_submitted(self) -> None:
        with self._lock:
            self._state.events_submitted += 1
        if self._c_submitted is not None:
            self._c_submitted.inc()

    def record_event_dropped(self) -> None:
        with self._lock:
            self._state.events_dropped += 1
        if self._c_dropped is not None:
            self._c_dropped.inc()

    def record_event_delivered(
        self,
        *,
        appenders: list[str] | None = None,
        duration_seconds: float | None = None,
    ) -> None:
        with self._lock:
            self._state.events_delivered += 1
        if not self._enabled:
            return
        if self._c_writes is not None and appenders:
            for name in appenders:
                self._c_writes.labels(appender=name).inc()
        if duration_seconds is not None and self._h_fanout_latency is not None:
            self._h_fanout_latency.observe(duration_seconds)

    def record_appender_error(self, *, appender: str | None = None) -> None:
        with self._lock:
            self._state.appender_errors += 1
        if self._c_appender_errors is not None:
            self._c_appender_errors.labels(appender=appender or "unknown").inc()

    def snapshot(self) -> DispatcherMetrics:
        with self._lock:
            return DispatcherMetrics(
                events_submitted=self._state.events_submitted,
                events_dropped=self._state.events_dropped,
                events_delivered=self._state.events_delivered,
                appender_errors=self._state.appender_errors,
            )
