"""Text formatters for log events.

Formatters are plain functions with the signature::

    (level, tags, message, timestamp, original_timestamp) -> str

They are pure: the same inputs always render the same line. Timestamps are
rendered in the local time zone with English month abbreviations regardless of
the process locale.

``get_formatter`` resolves a ``LogFormat`` through ``_formatters`` at call
time, so tests can swap an entry with ``monkeypatch.setitem``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Callable, Final, Sequence

from .levels import LogLevel

Formatter = Callable[[LogLevel, Sequence[str], str, datetime, datetime], str]


class LogFormat(str, Enum):
    """Named formatter variants."""

    FULL = "FULL"
    SIMPLE = "SIMPLE"
    MINIMAL = "MINIMAL"
    MINIMALTAGGED = "MINIMALTAGGED"


def format_from_string(value: str) -> LogFormat:
    """Map a format name to ``LogFormat`` (case-insensitive).

    Unknown names fall back to ``LogFormat.SIMPLE``.
    """
    try:
        return LogFormat(value.strip().upper())
    except ValueError:
        return LogFormat.SIMPLE


_MONTHS: Final[tuple[str, ...]] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def _stamp(ts: datetime, *, millis: bool) -> str:
    local = ts.astimezone()
    text = (
        f"{_MONTHS[local.month - 1]} {local.day:2d} "
        f"{local.hour:02d}:{local.minute:02d}:{local.second:02d}"
    )
    if millis:
        text += f".{local.microsecond // 1000:03d}"
    return text


def full_format(
    level: LogLevel,
    tags: Sequence[str],
    message: str,
    timestamp: datetime,
    original_timestamp: datetime,
) -> str:
    parts = [f"[{_stamp(timestamp, millis=True)}]", f"[{level.name}]"]
    if tags:
        parts.append(f"[{' '.join(tags)}]")
    if timestamp != original_timestamp:
        parts.append(f"[replayed from {_stamp(original_timestamp, millis=True)}]")
    parts.append(message)
    return " ".join(parts)


def simple_format(
    level: LogLevel,
    tags: Sequence[str],
    message: str,
    timestamp: datetime,
    original_timestamp: datetime,
) -> str:
    return f"[{_stamp(timestamp, millis=False)}] [{level.name}] {message}"


def minimal_tagged_format(
    level: LogLevel,
    tags: Sequence[str],
    message: str,
    timestamp: datetime,
    original_timestamp: datetime,
) -> str:
    if tags:
        return f"[{level.name}] [{' '.join(tags)}] {message}"
    return f"[{level.name}] {message}"


def minimal_format(
    level: LogLevel,
    tags: Sequence[str],
    message: str,
    timestamp: datetime,
    original_timestamp: datetime,
) -> str:
    return message


_formatters: dict[LogFormat, Formatter] = {
    LogFormat.FULL: full_format,
    LogFormat.SIMPLE: simple_format,
    LogFormat.MINIMALTAGGED: minimal_tagged_format,
    LogFormat.MINIMAL: minimal_format,
}


def get_formatter(fmt: LogFormat | str) -> Formatter:
    """Return the formatter registered for ``fmt``; unknown formats get SIMPLE."""
    try:
        return _formatters[LogFormat(fmt)]
    except (ValueError, KeyError):
        return _formatters[LogFormat.SIMPLE]


def register_formatter(fmt: LogFormat, formatter: Formatter) -> Formatter | None:
    """Replace the formatter for ``fmt`` and return the previous one.

    Appenders that already hold a formatter keep it; only later
    ``get_formatter`` lookups see the replacement.
    """
    if not callable(formatter):
        raise TypeError("formatter must be callable")
    previous = _formatters.get(fmt)
    _formatters[fmt] = formatter
    return previous


__all__ = [
    "Formatter",
    "LogFormat",
    "format_from_string",
    "full_format",
    "get_formatter",
    "minimal_format",
    "minimal_tagged_format",
    "register_formatter",
    "simple_format",
]
