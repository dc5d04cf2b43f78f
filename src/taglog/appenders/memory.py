from __future__ import annotations

import threading

from ..core.events import LogEvent
from ..core.formatters import Formatter
from ..core.levels import LevelLike, LogLevel
from . import BaseAppender


class MemoryAppender(BaseAppender):
    """Keep rendered lines (and the events behind them) in memory.

    Intended for tests and for capturing events to replay later.
    """

    name = "memory"

    def __init__(
        self,
        *,
        level: LevelLike = LogLevel.DEBUG,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(level=level, formatter=formatter)
        self._records_lock = threading.Lock()
        self._messages: list[str] = []
        self._events: list[LogEvent] = []

    def _write(self, event: LogEvent, formatter: Formatter) -> None:
        line = self.render(event, formatter)
        with self._records_lock:
            self._messages.append(line)
            self._events.append(event)

    def get_logged_messages(self) -> list[str]:
        with self._records_lock:
            return list(self._messages)

    def get_logged_events(self) -> list[LogEvent]:
        with self._records_lock:
            return list(self._events)

    def clear(self) -> None:
        with self._records_lock:
            self._messages.clear()
            self._events.clear()
