"""
Log event record for taglog.

A ``LogEvent`` is created by a ``Logger`` after admission and is owned by the
dispatcher from submission until every appender has been offered it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone

from .levels import LogLevel


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LogEvent:
    """Immutable description of a single log call."""

    level: LogLevel
    tags: tuple[str, ...]
    message: str
    timestamp: datetime
    # Differs from ``timestamp`` only for events re-emitted from a capture
    original_timestamp: datetime

    @classmethod
    def create(
        cls,
        level: LogLevel,
        message: str,
        tags: tuple[str, ...] = (),
        *,
        at: datetime | None = None,
    ) -> LogEvent:
        """Build a fresh (non-replayed) event stamped ``at`` or now."""
        when = at if at is not None else utc_now()
        return cls(
            level=level,
            tags=tags,
            message=message,
            timestamp=when,
            original_timestamp=when,
        )

    @property
    def is_replay(self) -> bool:
        return self.timestamp != self.original_timestamp

    def replayed(self, at: datetime | None = None) -> LogEvent:
        """Return a copy re-stamped for re-emission.

        The original timestamp is kept so formatters can show where the
        event came from.
        """
        return replace(self, timestamp=at if at is not None else utc_now())
