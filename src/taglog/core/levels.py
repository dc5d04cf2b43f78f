"""Severity levels for taglog.

Levels are totally ordered. An event at level ``E`` passes a threshold ``T``
when ``T <= E``; every filter in the library (loggers, tag overrides and
appenders) uses that single predicate.

Example:
    from taglog.core.levels import LogLevel, coerce_level

    LogLevel.INFO.allows(LogLevel.ERROR)  # True
    coerce_level("warning")  # LogLevel.WARN
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final, Union


class LogLevel(IntEnum):
    """Ordered log severity."""

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    def allows(self, level: LogLevel) -> bool:
        """Return True when an event at ``level`` passes this threshold."""
        return self <= level

    @classmethod
    def parse(cls, name: str) -> LogLevel:
        """Parse a level name (case-insensitive).

        Raises:
            ValueError: If the name is not a known level or alias.
        """
        normalized = name.strip().upper()
        try:
            return _ALIASES[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    def __str__(self) -> str:
        return self.name


_ALIASES: Final[dict[str, LogLevel]] = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARN": LogLevel.WARN,
    "WARNING": LogLevel.WARN,  # alias
    "ERROR": LogLevel.ERROR,
}

LevelLike = Union[LogLevel, str, int]


def coerce_level(value: LevelLike) -> LogLevel:
    """Normalize a level given as enum member, name, or integer priority.

    Raises:
        ValueError: If ``value`` does not name a level.
    """
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, str):
        return LogLevel.parse(value)
    try:
        return LogLevel(value)
    except ValueError as exc:
        raise ValueError(f"Unsupported log level: {value!r}") from exc


__all__ = ["LevelLike", "LogLevel", "coerce_level"]
