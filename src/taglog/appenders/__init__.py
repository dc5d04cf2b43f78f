from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from ..core.events import LogEvent
from ..core.formatters import Formatter, LogFormat, get_formatter
from ..core.levels import LevelLike, LogLevel, coerce_level


@runtime_checkable
class Appender(Protocol):
    """Appender (sink) interface.

    Appenders are the terminal consumers of log events. The dispatcher worker
    is the only caller of ``append``; ``set_level``, ``check_level`` and
    ``set_formatter`` may be called from any thread. Implementations must
    contain their own I/O errors; anything that escapes ``append`` is caught
    by the worker and reported through diagnostics.
    """

    def set_level(self, level: LevelLike) -> None: ...

    def check_level(self, level: LogLevel) -> bool: ...

    def set_formatter(self, formatter: Formatter) -> None: ...

    async def append(self, event: LogEvent) -> None:  # noqa: D401
        """Offer a single event to the appender."""
        ...


def default_format() -> LogFormat:
    """Best-effort lookup of the configured default formatter."""
    try:
        from ..core.settings import Settings

        return Settings().core.log_format
    except Exception:
        return LogFormat.SIMPLE


class BaseAppender:
    """Shared level and formatter handling for the built-in appenders.

    Subclasses implement ``_write``; ``append`` only calls it for events that
    pass the appender's own level.
    """

    name = "appender"

    def __init__(
        self,
        *,
        level: LevelLike = LogLevel.DEBUG,
        formatter: Formatter | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._level = coerce_level(level)
        self._formatter: Formatter = (
            formatter if formatter is not None else get_formatter(default_format())
        )

    @property
    def level(self) -> LogLevel:
        with self._lock:
            return self._level

    @property
    def formatter(self) -> Formatter:
        with self._lock:
            return self._formatter

    def set_level(self, level: LevelLike) -> None:
        new_level = coerce_level(level)
        with self._lock:
            self._level = new_level

    def check_level(self, level: LogLevel) -> bool:
        with self._lock:
            return self._level <= level

    def set_formatter(self, formatter: Formatter) -> None:
        if not callable(formatter):
            raise TypeError("formatter must be callable")
        with self._lock:
            self._formatter = formatter

    def render(self, event: LogEvent, formatter: Formatter | None = None) -> str:
        fmt = formatter if formatter is not None else self.formatter
        return fmt(
            event.level,
            event.tags,
            event.message,
            event.timestamp,
            event.original_timestamp,
        )

    async def append(self, event: LogEvent) -> None:
        with self._lock:
            level = self._level
            formatter = self._formatter
        if not level <= event.level:
            return
        self._write(event, formatter)

    def _write(self, event: LogEvent, formatter: Formatter) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self.level.name})"


from .memory import MemoryAppender  # noqa: E402
from .null import NullAppender  # noqa: E402
from .writer import StdErrAppender, StdOutAppender, WriterAppender  # noqa: E402

__all__ = [
    "Appender",
    "BaseAppender",
    "MemoryAppender",
    "NullAppender",
    "StdErrAppender",
    "StdOutAppender",
    "WriterAppender",
    "default_format",
]
