"""Process-wide asynchronous log dispatcher.

The dispatcher accepts events from any thread and hands them to a single
``DispatchWorker`` running on an asyncio event loop owned by one daemon
thread. Callers never wait on appender I/O: ``submit`` only posts the event
onto the loop's unbounded FIFO.

State machine::

    UNINITIALIZED -> RUNNING       first add_appender() or submit()
    RUNNING -> DRAINING -> RUNNING while wait_for_incoming() barriers are pending
    RUNNING -> PAUSED              pause_logging(): drain, then stop the worker
    PAUSED -> RUNNING              restart_logging()

Events submitted while paused are dropped and counted.
"""

from __future__ import annotations

import asyncio
import threading
from enum import Enum

from ..appenders import Appender
from ..metrics.metrics import MetricsCollector
from . import diagnostics
from .errors import AppenderProtocolError, InvalidAppenderError
from .events import LogEvent
from .worker import STOP, Delivery, DispatchWorker, DrainMarker, QueueItem


class DispatcherState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    DRAINING = "draining"
    PAUSED = "paused"


def _metrics_enabled() -> bool:
    """Best-effort lookup for the metrics toggle."""
    try:
        from .settings import Settings

        return bool(Settings().core.enable_metrics)
    except Exception:
        return False


class Dispatcher:
    """Serialize events from every logger to every registered appender."""

    def __init__(
        self,
        *,
        metrics: MetricsCollector | None = None,
        name: str = "taglog-dispatcher",
    ) -> None:
        self._name = name
        self._lock = threading.Lock()
        self._state = DispatcherState.UNINITIALIZED
        # Copy-on-write; submit captures one snapshot per event
        self._appenders: tuple[Appender, ...] = ()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[QueueItem] | None = None
        self._thread: threading.Thread | None = None
        self._pending_barriers = 0
        self._metrics = (
            metrics
            if metrics is not None
            else MetricsCollector(enabled=_metrics_enabled())
        )

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def appenders(self) -> tuple[Appender, ...]:
        return self._appenders

    # Registry -----------------------------------------------------------

    def add_appender(self, appender: Appender) -> None:
        """Register ``appender``; starts the worker if not yet initialized.

        Raises:
            InvalidAppenderError: If ``appender`` is None.
            AppenderProtocolError: If it lacks the appender methods.
        """
        if appender is None:
            raise InvalidAppenderError("appender must not be None")
        if not isinstance(appender, Appender):
            raise AppenderProtocolError(
                f"{type(appender).__name__} does not implement the appender protocol"
            )
        with self._lock:
            self._appenders = (*self._appenders, appender)
            if self._state is DispatcherState.UNINITIALIZED:
                self._start_locked()

    def remove_appender(self, appender: Appender) -> bool:
        with self._lock:
            remaining = tuple(a for a in self._appenders if a is not appender)
            removed = len(remaining) != len(self._appenders)
            self._appenders = remaining
        return removed

    def clear_appenders(self) -> None:
        with self._lock:
            self._appenders = ()

    # Submission ---------------------------------------------------------

    def submit(self, event: LogEvent) -> bool:
        """Enqueue ``event`` for delivery without waiting on I/O.

        The event goes to the appenders registered at the time of this call,
        whatever the registry holds when the worker reaches it.
        Returns False if the event was dropped because logging is paused.
        """
        with self._lock:
            if self._state is DispatcherState.UNINITIALIZED:
                self._start_locked()
            accepted = self._state is not DispatcherState.PAUSED
            if accepted:
                self._post_locked(Delivery(event, self._appenders))
        if accepted:
            self._metrics.record_event_submitted()
        else:
            self._metrics.record_event_dropped()
            diagnostics.warn(
                "dispatcher",
                "event dropped while paused",
                level=event.level.name,
                _rate_limit_key="paused-drop",
            )
        return accepted

    def wait_for_incoming(self) -> None:
        """Block until every event submitted before this call was delivered.

        Returns immediately when the dispatcher is not running, or when
        called from the worker thread (e.g. by an appender).
        """
        marker = DrainMarker()
        with self._lock:
            if self._state not in (DispatcherState.RUNNING, DispatcherState.DRAINING):
                return
            if threading.current_thread() is self._thread:
                return
            self._pending_barriers += 1
            self._state = DispatcherState.DRAINING
            self._post_locked(marker)
        try:
            marker.wait()
        finally:
            with self._lock:
                self._pending_barriers -= 1
                if (
                    self._pending_barriers == 0
                    and self._state is DispatcherState.DRAINING
                ):
                    self._state = DispatcherState.RUNNING

    # Lifecycle ----------------------------------------------------------

    def pause_logging(self, timeout: float | None = None) -> bool:
        """Stop accepting events, drain the queue, and stop the worker.

        Idempotent. Returns False only if ``timeout`` expired before the
        worker finished draining.
        """
        with self._lock:
            if self._state is DispatcherState.PAUSED:
                thread = self._thread
            else:
                previous = self._state
                self._state = DispatcherState.PAUSED
                if previous is DispatcherState.UNINITIALIZED:
                    return True
                self._post_locked(STOP)
                thread = self._thread
        if thread is None:
            return True
        if thread is threading.current_thread():
            # Called from an appender; the worker stops after this event
            return True
        thread.join(timeout)
        if thread.is_alive():
            diagnostics.warn(
                "dispatcher",
                "pause timed out before the queue drained",
                timeout=timeout,
            )
            return False
        with self._lock:
            if self._thread is thread:
                self._thread = None
                self._loop = None
                self._queue = None
        return True

    def restart_logging(self) -> None:
        """Resume accepting events with a fresh worker."""
        with self._lock:
            if self._state in (DispatcherState.RUNNING, DispatcherState.DRAINING):
                return
            previous = self._thread
        if previous is not None and previous is not threading.current_thread():
            # A timed-out pause may still be draining; never run two workers
            previous.join()
        with self._lock:
            if self._state in (DispatcherState.RUNNING, DispatcherState.DRAINING):
                return
            self._start_locked()

    def _start_locked(self) -> None:
        loop = asyncio.new_event_loop()
        queue: asyncio.Queue[QueueItem] = asyncio.Queue()
        worker = DispatchWorker(
            queue=queue,
            metrics=self._metrics,
        )
        thread = threading.Thread(
            target=self._run_loop,
            args=(loop, worker),
            name=self._name,
            daemon=True,
        )
        self._loop = loop
        self._queue = queue
        self._thread = thread
        self._state = DispatcherState.RUNNING
        thread.start()

        from . import shutdown

        shutdown.register_dispatcher(self)

    def _post_locked(self, item: QueueItem) -> None:
        assert self._loop is not None and self._queue is not None
        self._loop.call_soon_threadsafe(self._queue.put_nowait, item)

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop, worker: DispatchWorker) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(worker.run())
        finally:
            loop.close()

    def __repr__(self) -> str:
        return (
            f"Dispatcher(state={self._state.value}, "
            f"appenders={len(self._appenders)})"
        )


_default_dispatcher: Dispatcher | None = None
_default_lock = threading.Lock()


def get_dispatcher() -> Dispatcher:
    """Return the process-wide dispatcher, creating it on first use."""
    global _default_dispatcher
    dispatcher = _default_dispatcher
    if dispatcher is None:
        with _default_lock:
            if _default_dispatcher is None:
                _default_dispatcher = Dispatcher()
            dispatcher = _default_dispatcher
    return dispatcher


def _reset_default_dispatcher() -> None:
    """Pause and discard the process-wide dispatcher (for testing only)."""
    global _default_dispatcher
    with _default_lock:
        dispatcher = _default_dispatcher
        _default_dispatcher = None
    if dispatcher is not None:
        dispatcher.pause_logging(timeout=5.0)
