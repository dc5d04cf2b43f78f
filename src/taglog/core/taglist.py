"""Per-tag level overrides.

A ``TagList`` lets a logger admit events below its default level when they
carry a tag whose override allows them. The list stays sorted by tag so
inserts are a single ``bisect`` and iteration order is deterministic.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterable, Iterator, NamedTuple

from .levels import LogLevel


class TagLevel(NamedTuple):
    tag: str
    level: LogLevel


class TagList:
    """Sorted ``(tag, level)`` pairs, each tag at most once.

    Not thread-safe on its own; ``Logger`` guards access with its lock.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[tuple[str, LogLevel]] = ()) -> None:
        self._entries: list[TagLevel] = []
        for tag, level in entries:
            self.set_tag_level(tag, level)

    def set_tag_level(self, tag: str, level: LogLevel) -> TagList:
        """Set the override for ``tag``, replacing any existing one."""
        idx = bisect_left(self._entries, tag, key=_tag_of)
        if idx < len(self._entries) and self._entries[idx].tag == tag:
            self._entries[idx] = TagLevel(tag, level)
        else:
            self._entries.insert(idx, TagLevel(tag, level))
        return self

    def check_tag_level(self, level: LogLevel, tags: Iterable[str]) -> bool:
        """Return True if any of ``tags`` has an override admitting ``level``.

        The result does not depend on the order of ``tags`` or on duplicates.
        """
        if not self._entries:
            return False
        if not isinstance(tags, (tuple, list, set, frozenset)):
            tags = tuple(tags)
        if not tags:
            return False
        for entry in self._entries:
            if entry.level <= level and entry.tag in tags:
                return True
        return False

    def get(self, tag: str) -> LogLevel | None:
        idx = bisect_left(self._entries, tag, key=_tag_of)
        if idx < len(self._entries) and self._entries[idx].tag == tag:
            return self._entries[idx].level
        return None

    def remove(self, tag: str) -> bool:
        idx = bisect_left(self._entries, tag, key=_tag_of)
        if idx < len(self._entries) and self._entries[idx].tag == tag:
            del self._entries[idx]
            return True
        return False

    def copy(self) -> TagList:
        clone = TagList()
        clone._entries = list(self._entries)
        return clone

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TagLevel]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagList):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        pairs = ", ".join(f"{e.tag}={e.level.name}" for e in self._entries)
        return f"TagList({pairs})"


def _tag_of(entry: TagLevel) -> str:
    return entry.tag


__all__ = ["TagLevel", "TagList"]
