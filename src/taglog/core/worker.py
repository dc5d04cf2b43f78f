"""
Background dispatch worker.

The worker runs on the dispatcher's event loop and is the only code that
calls ``Appender.append``. Serializing every appender call through one worker
keeps each appender's output whole per event and in submission order.

Each queued ``Delivery`` carries the appenders registered when the event was
submitted, so registry changes made while a backlog exists never add or
remove recipients of events already queued.
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import Sequence
from typing import NamedTuple, Union

from ..metrics.metrics import MetricsCollector
from .diagnostics import warn
from .events import LogEvent


class Delivery(NamedTuple):
    event: LogEvent
    appenders: Sequence[object]


class DrainMarker:
    """Barrier posted by ``wait_for_incoming``; set once the worker reaches it."""

    __slots__ = ("_done",)

    def __init__(self) -> None:
        self._done = threading.Event()

    def release(self) -> None:
        self._done.set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)


class _StopSignal:
    __slots__ = ()

    def __repr__(self) -> str:
        return "STOP"


STOP = _StopSignal()

QueueItem = Union[Delivery, DrainMarker, _StopSignal]


def _appender_name(appender: object) -> str:
    return getattr(appender, "name", type(appender).__name__)


class DispatchWorker:
    """Dequeue events one at a time and offer each to its appenders."""

    def __init__(
        self,
        *,
        queue: asyncio.Queue[QueueItem],
        metrics: MetricsCollector | None,
    ) -> None:
        self._queue = queue
        self._metrics = metrics

    async def run(self) -> None:
        try:
            while True:
                item = await self._queue.get()
                if item is STOP:
                    return
                if isinstance(item, DrainMarker):
                    item.release()
                    continue
                await self.deliver(*item)  # type: ignore[misc]
        except asyncio.CancelledError:
            return
        except Exception as exc:  # pragma: no cover - defensive catch
            self._emit_worker_error(exc)
            return
        finally:
            # Never leave a wait_for_incoming caller blocked on a dead worker
            self._release_pending_markers()

    async def deliver(self, event: LogEvent, appenders: Sequence[object]) -> None:
        """Fan ``event`` out to ``appenders`` in order.

        A failing appender is skipped; later appenders still see the event.
        """
        start = time.perf_counter()
        for appender in appenders:
            try:
                await appender.append(event)  # type: ignore[attr-defined]
            except Exception as exc:
                self._record_appender_error(appender, exc)
        if self._metrics is not None:
            try:
                self._metrics.record_event_delivered(
                    appenders=[_appender_name(a) for a in appenders],
                    duration_seconds=time.perf_counter() - start,
                )
            except Exception:
                pass

    def _release_pending_markers(self) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            if isinstance(item, DrainMarker):
                item.release()

    def _record_appender_error(self, appender: object, exc: Exception) -> None:
        name = _appender_name(appender)
        if self._metrics is not None:
            try:
                self._metrics.record_appender_error(appender=name)
            except Exception:
                pass
        warn(
            "appender",
            "append error",
            appender=name,
            error_type=type(exc).__name__,
            error=str(exc),
            _rate_limit_key=f"append:{name}",
        )

    def _emit_worker_error(self, exc: Exception) -> None:
        warn(
            "worker",
            "worker error",
            error_type=type(exc).__name__,
            error=str(exc),
        )
