"""
Public entrypoints for taglog.

Package-level helpers forward to the process-wide default logger and
dispatcher, so most applications never construct either directly::

    import taglog

    taglog.add_appender(taglog.StdOutAppender())
    taglog.set_default_log_level(taglog.DEBUG)
    taglog.set_default_tag_level("db", taglog.DEBUG)

    taglog.info("service started on %s", "0.0.0.0:8080")
    taglog.debug("query took %dms", 12, tags=["db"])

    taglog.wait_for_incoming()
"""

from __future__ import annotations

from typing import Any

from ._version import __version__
from .appenders import (
    Appender,
    BaseAppender,
    MemoryAppender,
    NullAppender,
    StdErrAppender,
    StdOutAppender,
    WriterAppender,
)
from .core.dispatcher import Dispatcher, DispatcherState, get_dispatcher
from .core.errors import AppenderProtocolError, InvalidAppenderError, TaglogError
from .core.events import LogEvent
from .core.formatters import (
    Formatter,
    LogFormat,
    format_from_string,
    get_formatter,
    register_formatter,
)
from .core.levels import LevelLike, LogLevel
from .core.logger import Logger, Tags, get_default_logger
from .core.taglist import TagList

DEBUG = LogLevel.DEBUG
INFO = LogLevel.INFO
WARN = LogLevel.WARN
ERROR = LogLevel.ERROR

FULL = LogFormat.FULL
SIMPLE = LogFormat.SIMPLE
MINIMAL = LogFormat.MINIMAL
MINIMALTAGGED = LogFormat.MINIMALTAGGED

VERSION = __version__


def debug(msg: object, *args: Any, tags: Tags = None) -> None:
    get_default_logger().debug(msg, *args, tags=tags)


def info(msg: object, *args: Any, tags: Tags = None) -> None:
    get_default_logger().info(msg, *args, tags=tags)


def warn(msg: object, *args: Any, tags: Tags = None) -> None:
    get_default_logger().warn(msg, *args, tags=tags)


warning = warn


def error(msg: object, *args: Any, tags: Tags = None) -> None:
    get_default_logger().error(msg, *args, tags=tags)


def set_default_log_level(level: LevelLike) -> None:
    get_default_logger().set_log_level(level)


def set_default_tag_level(tag: str, level: LevelLike) -> None:
    get_default_logger().set_tag_level(tag, level)


def add_appender(appender: Appender) -> None:
    get_dispatcher().add_appender(appender)


def clear_appenders() -> None:
    get_dispatcher().clear_appenders()


def wait_for_incoming() -> None:
    get_dispatcher().wait_for_incoming()


def pause_logging(timeout: float | None = None) -> bool:
    return get_dispatcher().pause_logging(timeout)


def restart_logging() -> None:
    get_dispatcher().restart_logging()


__all__ = [
    # Levels and formats
    "DEBUG",
    "INFO",
    "WARN",
    "ERROR",
    "FULL",
    "SIMPLE",
    "MINIMAL",
    "MINIMALTAGGED",
    "LogLevel",
    "LogFormat",
    "Formatter",
    "format_from_string",
    "get_formatter",
    "register_formatter",
    # Core types
    "LogEvent",
    "Logger",
    "TagList",
    "Dispatcher",
    "DispatcherState",
    # Appenders
    "Appender",
    "BaseAppender",
    "WriterAppender",
    "StdOutAppender",
    "StdErrAppender",
    "MemoryAppender",
    "NullAppender",
    # Errors
    "TaglogError",
    "InvalidAppenderError",
    "AppenderProtocolError",
    # Default logger and dispatcher helpers
    "get_default_logger",
    "get_dispatcher",
    "debug",
    "info",
    "warn",
    "warning",
    "error",
    "set_default_log_level",
    "set_default_tag_level",
    "add_appender",
    "clear_appenders",
    "wait_for_incoming",
    "pause_logging",
    "restart_logging",
    "__version__",
    "VERSION",
]
