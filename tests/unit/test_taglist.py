"""
Unit tests for TagList overrides.
"""

from __future__ import annotations

from taglog.core.levels import LogLevel
from taglog.core.taglist import TagLevel, TagList


def _tags(tag_list: TagList) -> list[str]:
    return [entry.tag for entry in tag_list]


class TestSetTagLevel:
    def test_inserts_keep_lexicographic_order(self) -> None:
        tl = TagList()
        for tag in ["net", "db", "auth", "zeta", "cache"]:
            tl = tl.set_tag_level(tag, LogLevel.DEBUG)

        assert _tags(tl) == ["auth", "cache", "db", "net", "zeta"]

    def test_existing_tag_is_replaced_in_place(self) -> None:
        tl = TagList([("db", LogLevel.ERROR), ("net", LogLevel.INFO)])

        result = tl.set_tag_level("db", LogLevel.DEBUG)

        assert result is tl
        assert list(tl) == [
            TagLevel("db", LogLevel.DEBUG),
            TagLevel("net", LogLevel.INFO),
        ]

    def test_idempotent_when_pair_present(self) -> None:
        tl = TagList([("db", LogLevel.WARN)])
        before = tl.copy()

        tl.set_tag_level("db", LogLevel.WARN)

        assert tl == before
        assert len(tl) == 1


class TestCheckTagLevel:
    def test_empty_list_admits_nothing(self) -> None:
        assert TagList().check_tag_level(LogLevel.ERROR, ["db"]) is False

    def test_empty_tags_admit_nothing(self) -> None:
        tl = TagList([("db", LogLevel.DEBUG)])
        assert tl.check_tag_level(LogLevel.ERROR, []) is False

    def test_admits_when_override_allows_level(self) -> None:
        tl = TagList([("db", LogLevel.DEBUG), ("net", LogLevel.ERROR)])

        assert tl.check_tag_level(LogLevel.DEBUG, ["db"]) is True
        assert tl.check_tag_level(LogLevel.WARN, ["net"]) is False
        assert tl.check_tag_level(LogLevel.ERROR, ["net"]) is True

    def test_unknown_tags_are_ignored(self) -> None:
        tl = TagList([("db", LogLevel.DEBUG)])
        assert tl.check_tag_level(LogLevel.ERROR, ["web", "cache"]) is False

    def test_any_matching_tag_is_enough(self) -> None:
        tl = TagList([("db", LogLevel.ERROR), ("net", LogLevel.DEBUG)])
        assert tl.check_tag_level(LogLevel.INFO, ["db", "net"]) is True

    def test_duplicates_and_order_do_not_matter(self) -> None:
        tl = TagList([("db", LogLevel.INFO)])

        assert tl.check_tag_level(LogLevel.INFO, ["x", "db", "db"]) is True
        assert tl.check_tag_level(LogLevel.INFO, ["db", "x"]) is True

    def test_accepts_generators(self) -> None:
        tl = TagList([("db", LogLevel.INFO)])
        assert tl.check_tag_level(LogLevel.INFO, (t for t in ["db"])) is True


class TestAccessors:
    def test_get_and_remove(self) -> None:
        tl = TagList([("db", LogLevel.WARN)])

        assert tl.get("db") is LogLevel.WARN
        assert tl.get("net") is None
        assert tl.remove("db") is True
        assert tl.remove("db") is False
        assert len(tl) == 0

    def test_copy_is_independent(self) -> None:
        tl = TagList([("db", LogLevel.WARN)])
        clone = tl.copy()
        clone.set_tag_level("net", LogLevel.DEBUG)

        assert len(tl) == 1
        assert len(clone) == 2

    def test_repr_lists_pairs(self) -> None:
        tl = TagList([("db", LogLevel.WARN)])
        assert repr(tl) == "TagList(db=WARN)"
