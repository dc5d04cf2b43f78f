"""
Caller-facing logger.

A ``Logger`` owns a default level and per-tag overrides. Emission methods run
the admission check before rendering the message, so filtered calls cost a
timestamp and a comparison, never string interpolation.

Example:
    from taglog import Logger, MemoryAppender, add_appender, wait_for_incoming

    log = Logger("WARN")
    log.set_tag_level("db", "DEBUG")
    add_appender(MemoryAppender())

    log.info("skipped")                      # below WARN, no "db" tag
    log.debug("query %s", "q1", tags=["db"])  # admitted by the override
    wait_for_incoming()
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Iterable

from . import diagnostics
from .events import LogEvent, utc_now
from .levels import LevelLike, LogLevel, coerce_level
from .taglist import TagLevel, TagList

if TYPE_CHECKING:
    from .dispatcher import Dispatcher

Tags = Iterable[str] | str | None


def _normalize_tags(tags: Tags) -> tuple[str, ...]:
    if not tags:
        return ()
    if isinstance(tags, str):
        return (tags,)
    return tuple(tags)


def render_message(msg: object, args: tuple[Any, ...]) -> str:
    """Interpolate ``msg % args`` the way ``logging.LogRecord`` does.

    Malformed format strings and messages that fail to convert to ``str``
    never raise; the raw message and arguments are rendered instead.
    """
    text: str | None = None
    try:
        text = str(msg)
        if not args:
            return text
        values: Any = args
        if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
            values = args[0]
        return text % values
    except Exception as exc:
        diagnostics.warn(
            "logger",
            "message format error",
            error_type=type(exc).__name__,
            error=str(exc),
            _rate_limit_key="message-format",
        )
        if text is None:
            text = _safe_repr(msg)
        if not args:
            return text
        rendered = ", ".join(_safe_repr(a) for a in args)
        return f"{text} (args: {rendered})"


def _safe_repr(value: object) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


class Logger:
    """Filter front end producing ``LogEvent`` objects.

    Loggers are independent of each other but share a dispatcher. When no
    dispatcher is given, the process-wide one is looked up on every
    submission.
    """

    def __init__(
        self,
        level: LevelLike = LogLevel.INFO,
        *,
        dispatcher: Dispatcher | None = None,
        name: str | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._level = coerce_level(level)
        self._overrides = TagList()
        self._dispatcher = dispatcher
        self.name = name

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is not None:
            return self._dispatcher
        from .dispatcher import get_dispatcher

        return get_dispatcher()

    def set_log_level(self, level: LevelLike) -> None:
        self._level = coerce_level(level)

    def set_tag_level(self, tag: str, level: LevelLike) -> None:
        new_level = coerce_level(level)
        with self._lock:
            self._overrides = self._overrides.set_tag_level(tag, new_level)

    def tag_levels(self) -> list[TagLevel]:
        with self._lock:
            return list(self._overrides)

    def is_enabled_for(self, level: LogLevel, tags: Tags = ()) -> bool:
        if self._level <= level:
            return True
        tag_seq = _normalize_tags(tags)
        with self._lock:
            return self._overrides.check_tag_level(level, tag_seq)

    def log(self, level: LevelLike, msg: object, *args: Any, tags: Tags = None) -> None:
        try:
            lvl = coerce_level(level)
        except ValueError:
            diagnostics.warn("logger", "unknown level", level=str(level))
            return
        self._emit(lvl, msg, args, tags)

    def debug(self, msg: object, *args: Any, tags: Tags = None) -> None:
        self._emit(LogLevel.DEBUG, msg, args, tags)

    def info(self, msg: object, *args: Any, tags: Tags = None) -> None:
        self._emit(LogLevel.INFO, msg, args, tags)

    def warn(self, msg: object, *args: Any, tags: Tags = None) -> None:
        self._emit(LogLevel.WARN, msg, args, tags)

    warning = warn

    def error(self, msg: object, *args: Any, tags: Tags = None) -> None:
        self._emit(LogLevel.ERROR, msg, args, tags)

    def replay(self, event: LogEvent) -> bool:
        """Re-emit a captured event, keeping its original timestamp.

        Returns True if the event passed admission and was accepted.
        """
        now = utc_now()
        if not self.is_enabled_for(event.level, event.tags):
            return False
        return self._submit(event.replayed(now))

    def _emit(
        self, level: LogLevel, msg: object, args: tuple[Any, ...], tags: Tags
    ) -> None:
        now = utc_now()
        tag_seq = _normalize_tags(tags)
        if not self.is_enabled_for(level, tag_seq):
            return
        event = LogEvent(
            level=level,
            tags=tag_seq,
            message=render_message(msg, args),
            timestamp=now,
            original_timestamp=now,
        )
        self._submit(event)

    def _submit(self, event: LogEvent) -> bool:
        try:
            return self.dispatcher.submit(event)
        except Exception as exc:  # pragma: no cover - defensive catch
            diagnostics.warn(
                "logger",
                "submit error",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return False

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"Logger({label}level={self._level.name})"


def _default_level() -> LogLevel:
    try:
        from .settings import Settings

        return Settings().core.level
    except Exception:
        return LogLevel.INFO


_default_logger: Logger | None = None
_default_lock = threading.Lock()


def get_default_logger() -> Logger:
    """Return the process-wide default logger, creating it on first use."""
    global _default_logger
    logger = _default_logger
    if logger is None:
        with _default_lock:
            if _default_logger is None:
                _default_logger = Logger(_default_level(), name="default")
            logger = _default_logger
    return logger


def _reset_default_logger() -> None:
    """Discard the default logger (for testing only)."""
    global _default_logger
    with _default_lock:
        _default_logger = None
