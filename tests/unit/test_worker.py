from __future__ import annotations

import asyncio
from typing import Any

import pytest

from taglog.core import diagnostics
from taglog.core.events import LogEvent
from taglog.core.levels import LogLevel
from taglog.core.worker import STOP, Delivery, DispatchWorker, DrainMarker, QueueItem
from taglog.metrics.metrics import MetricsCollector


class _ListAppender:
    def __init__(self, name: str, sink: list[str]) -> None:
        self.name = name
        self._sink = sink

    async def append(self, event: LogEvent) -> None:
        self._sink.append(f"{self.name}:{event.message}")


class _Exploding:
    name = "exploding"

    async def append(self, event: LogEvent) -> None:
        raise ValueError("bad write")


def _delivery(message: str, appenders: list[Any]) -> Delivery:
    return Delivery(LogEvent.create(LogLevel.INFO, message), tuple(appenders))


@pytest.mark.asyncio
async def test_run_delivers_in_order_and_stops() -> None:
    seen: list[str] = []
    appenders = [_ListAppender("a", seen), _ListAppender("b", seen)]
    queue: asyncio.Queue[QueueItem] = asyncio.Queue()
    worker = DispatchWorker(queue=queue, metrics=None)

    for msg in ("1", "2"):
        queue.put_nowait(_delivery(msg, appenders))
    queue.put_nowait(STOP)

    await asyncio.wait_for(worker.run(), timeout=2)

    assert seen == ["a:1", "b:1", "a:2", "b:2"]


@pytest.mark.asyncio
async def test_each_delivery_uses_its_own_recipients() -> None:
    seen: list[str] = []
    first = _ListAppender("a", seen)
    second = _ListAppender("b", seen)
    queue: asyncio.Queue[QueueItem] = asyncio.Queue()
    worker = DispatchWorker(queue=queue, metrics=None)

    queue.put_nowait(_delivery("1", [first]))
    queue.put_nowait(_delivery("2", [second]))
    queue.put_nowait(STOP)

    await asyncio.wait_for(worker.run(), timeout=2)

    assert seen == ["a:1", "b:2"]


@pytest.mark.asyncio
async def test_marker_released_after_preceding_events() -> None:
    seen: list[str] = []
    queue: asyncio.Queue[QueueItem] = asyncio.Queue()
    worker = DispatchWorker(queue=queue, metrics=None)
    marker = DrainMarker()

    queue.put_nowait(_delivery("before", [_ListAppender("a", seen)]))
    queue.put_nowait(marker)
    queue.put_nowait(STOP)

    await asyncio.wait_for(worker.run(), timeout=2)

    assert marker.wait(timeout=0) is True
    assert seen == ["a:before"]


@pytest.mark.asyncio
async def test_markers_behind_stop_are_released() -> None:
    queue: asyncio.Queue[QueueItem] = asyncio.Queue()
    worker = DispatchWorker(queue=queue, metrics=None)
    late = DrainMarker()

    queue.put_nowait(STOP)
    queue.put_nowait(late)

    await asyncio.wait_for(worker.run(), timeout=2)

    assert late.wait(timeout=0) is True


@pytest.mark.asyncio
async def test_appender_errors_are_contained_and_reported() -> None:
    captured: list[dict[str, Any]] = []
    diagnostics._internal_logging_enabled = True
    diagnostics.set_writer_for_tests(captured.append)

    seen: list[str] = []
    metrics = MetricsCollector(enabled=True)
    queue: asyncio.Queue[QueueItem] = asyncio.Queue()
    worker = DispatchWorker(queue=queue, metrics=metrics)

    await worker.deliver(
        LogEvent.create(LogLevel.ERROR, "boom"),
        (_Exploding(), _ListAppender("ok", seen)),
    )

    assert seen == ["ok:boom"]
    snap = metrics.snapshot()
    assert snap.appender_errors == 1
    assert snap.events_delivered == 1
    assert metrics.registry is not None
    assert (
        metrics.registry.get_sample_value(
            "taglog_appender_errors_total", {"appender": "exploding"}
        )
        == 1.0
    )
    assert captured[0]["component"] == "appender"
    assert captured[0]["appender"] == "exploding"
    assert captured[0]["error_type"] == "ValueError"
