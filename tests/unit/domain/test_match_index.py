"""Unit tests for the MatchIndex domain service."""

from uuid import uuid4

import pytest

from loreforge.config.discovery_config import MatchConfig
from loreforge.domain.models.entity import EntityKind, RosterEntry
from loreforge.domain.services.match_index import MatchIndex, MatchKind


@pytest.fixture
def vale() -> RosterEntry:
    return RosterEntry(uuid4(), "Captain Vale", EntityKind.NPC)


@pytest.fixture
def order() -> RosterEntry:
    return RosterEntry(uuid4(), "The Order of the Silver Flame", EntityKind.FACTION)


@pytest.fixture
def index(vale: RosterEntry, order: RosterEntry) -> MatchIndex:
    return MatchIndex([vale, order])


class TestExactMatch:
    """Tests for identity-key matches."""

    def test_decorated_name_matches_exactly(
        self, index: MatchIndex, vale: RosterEntry
    ) -> None:
        """Case and punctuation do not prevent an exact match."""
        result = index.match("captain vale.")

        assert result.kind is MatchKind.EXACT
        assert result.entity_id == vale.entity_id
        assert result.score == 1.0
        assert result.is_exact

    def test_get_by_name(self, index: MatchIndex, vale: RosterEntry) -> None:
        """get() looks up entries by identity key."""
        assert index.get("[[Captain Vale]]") == vale
        assert index.get("Captain Vail") is None


class TestFuzzyMatch:
    """Tests for advisory fuzzy matches."""

    def test_near_spelling_is_fuzzy(self, index: MatchIndex, vale: RosterEntry) -> None:
        """A small spelling difference is a fuzzy match above threshold."""
        result = index.match("Captain Vail")

        assert result.kind is MatchKind.FUZZY
        assert result.entity_id == vale.entity_id
        assert 0.85 <= result.score < 1.0
        assert not result.is_exact

    def test_whole_word_containment(self, index: MatchIndex, order: RosterEntry) -> None:
        """A name contained word-for-word in a known name is fuzzy."""
        result = index.match("Silver Flame")

        assert result.kind is MatchKind.FUZZY
        assert result.entity_id == order.entity_id
        assert result.score >= 0.6

    def test_short_names_never_match_by_containment(self, index: MatchIndex) -> None:
        """Keys under the minimum length need a real similarity."""
        assert index.match("Val").kind is MatchKind.NONE

    def test_unrelated_name(self, index: MatchIndex) -> None:
        """Unrelated names do not match."""
        result = index.match("Brannoc Stoneheart")

        assert result.kind is MatchKind.NONE
        assert result.entity_id is None
        assert not result.is_match

    def test_threshold_is_configurable(self, vale: RosterEntry) -> None:
        """A stricter threshold rejects near spellings."""
        strict = MatchIndex([vale], MatchConfig(fuzzy_threshold=0.99))

        assert strict.match("Captain Vail").kind is MatchKind.NONE


class TestRegister:
    """Tests for register() and index bookkeeping."""

    def test_register_makes_name_known(self) -> None:
        """Entities created during a commit become matchable."""
        index = MatchIndex.empty()
        entry = RosterEntry(uuid4(), "Warehouse 7", EntityKind.LOCATION)

        index.register(entry)

        assert index.match("warehouse 7").entity_id == entry.entity_id
        assert "warehouse 7" in index.known_keys
        assert index.entry(entry.entity_id) == entry
        assert len(index) == 1

    def test_first_entry_keeps_the_key(self, vale: RosterEntry) -> None:
        """A later entry with the same key does not replace the first."""
        index = MatchIndex([vale])
        duplicate = RosterEntry(uuid4(), "captain vale", EntityKind.NPC)

        index.register(duplicate)

        assert index.get("Captain Vale") == vale
        assert len(index) == 2

    def test_blank_names_are_not_indexed(self) -> None:
        """Entries without a usable name are skipped."""
        index = MatchIndex([RosterEntry(uuid4(), "  ", EntityKind.NPC)])

        assert len(index) == 0
        assert index.match("").kind is MatchKind.NONE
