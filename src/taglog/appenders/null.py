from __future__ import annotations

from ..core.events import LogEvent
from ..core.formatters import Formatter
from ..core.levels import LevelLike, LogLevel
from . import BaseAppender


class NullAppender(BaseAppender):
    """Discard events, counting the ones that pass the level check."""

    name = "null"

    def __init__(
        self,
        *,
        level: LevelLike = LogLevel.DEBUG,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(level=level, formatter=formatter)
        self._count = 0

    def _write(self, event: LogEvent, formatter: Formatter) -> None:
        # Only the worker thread writes; int reads are atomic for callers
        self._count += 1

    def count(self) -> int:
        return self._count

    def reset(self) -> None:
        self._count = 0
