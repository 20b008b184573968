"""Unit tests for Lore Forge domain models."""

from uuid import uuid4

import pytest

from loreforge.domain.errors.commit import CommitFatalError, CommitItemError
from loreforge.domain.models.commit import CommitResult, CommittedDiscovery
from loreforge.domain.models.conflict import Conflict, ConflictResolution
from loreforge.domain.models.discovery import DiscoveryStatus
from loreforge.domain.models.entity import Entity, EntityKind
from loreforge.domain.models.review import CanonScore


class TestEntityKind:
    """Tests for EntityKind.parse()."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("NPC", EntityKind.NPC),
            (" location ", EntityKind.LOCATION),
            ("monster", EntityKind.CREATURE),
            ("other", EntityKind.UNCLASSIFIED),
            ("spaceship", EntityKind.UNCLASSIFIED),
            (None, EntityKind.UNCLASSIFIED),
            (EntityKind.ITEM, EntityKind.ITEM),
        ],
    )
    def test_parse(self, raw: object, expected: EntityKind) -> None:
        """Loose kind values parse onto the closed set."""
        assert EntityKind.parse(raw) is expected  # type: ignore[arg-type]


class TestEntity:
    """Tests for Entity helpers."""

    def test_soft_delete(self) -> None:
        """Soft-deleted entities keep their row but are flagged."""
        entity = Entity(uuid4(), uuid4(), "Captain Vale", EntityKind.NPC)

        deleted = entity.soft_deleted()

        assert not entity.is_deleted
        assert deleted.is_deleted
        assert deleted.entity_id == entity.entity_id


class TestConflict:
    """Tests for Conflict resolution helpers."""

    @pytest.fixture
    def conflict(self) -> Conflict:
        entity_id = uuid4()
        return Conflict(
            conflict_id=Conflict.make_id(entity_id, "Status"),
            entity_id=entity_id,
            attribute="status",
            new_text="dead",
            old_text="alive",
            existing_fact_id=uuid4(),
        )

    def test_id_is_deterministic(self, conflict: Conflict) -> None:
        """The id is entity id and lower-cased attribute."""
        assert conflict.conflict_id == f"{conflict.entity_id}:status"

    @pytest.mark.parametrize(
        ("resolution", "note", "expected"),
        [
            (ConflictResolution.UNRESOLVED, None, None),
            (ConflictResolution.KEEP_OLD, None, "alive"),
            (ConflictResolution.TAKE_NEW, None, "dead"),
            (ConflictResolution.MERGED_NOTE, "presumed dead", "presumed dead"),
        ],
    )
    def test_kept_value(
        self,
        conflict: Conflict,
        resolution: ConflictResolution,
        note: str | None,
        expected: str | None,
    ) -> None:
        """Each resolution keeps the matching text."""
        assert conflict.with_resolution(resolution, note).kept_value() == expected


class TestCommitResult:
    """Tests for CommitResult reporting."""

    def test_failed_summary(self) -> None:
        """A failed anchor is reported with its reason."""
        result = CommitResult.failed(CommitFatalError("The Gilded Hand", "database down"))

        assert not result.success
        assert result.summary() == "entity not saved: database down"

    def test_partial_summary(self) -> None:
        """Failed stubs are counted against attempted Discoveries."""
        result = CommitResult(
            success=True,
            outcomes={
                "mira voss": CommittedDiscovery("mira voss", uuid4(), DiscoveryStatus.COMMITTED),
                "old tomas": CommittedDiscovery("old tomas", None, DiscoveryStatus.CREATE_STUB),
            },
            errors=[CommitItemError("old tomas", "create_stub", "timed out", timed_out=True)],
        )

        assert result.is_partial
        assert result.summary() == "entity saved; 1 of 2 linked stubs failed"
        assert list(result.entity_ids_by_key) == ["mira voss"]
        assert result.to_dict()["errors"][0]["timed_out"] is True


class TestCanonScore:
    """Tests for CanonScore.from_counts()."""

    @pytest.mark.parametrize(
        ("discoveries", "existing", "expected"),
        [
            (0, 0, CanonScore.HIGH),
            (1, 5, CanonScore.HIGH),
            (3, 1, CanonScore.MEDIUM),
            (6, 4, CanonScore.MEDIUM),
            (8, 1, CanonScore.LOW),
        ],
    )
    def test_rating(self, discoveries: int, existing: int, expected: CanonScore) -> None:
        """Text leaning on known entities rates higher."""
        assert CanonScore.from_counts(discoveries, existing) is expected
