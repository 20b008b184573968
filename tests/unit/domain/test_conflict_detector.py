"""Unit tests for the ConflictDetector domain service."""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from loreforge.domain.models.conflict import Conflict, ConflictKind, ConflictResolution
from loreforge.domain.models.fact import Fact, GeneratedStatement
from loreforge.domain.services.conflict_detector import ConflictDetector, values_agree


def _fact(entity_id: UUID, attribute: str, value: str, age_minutes: int = 0) -> Fact:
    return Fact(
        fact_id=uuid4(),
        entity_id=entity_id,
        campaign_id=uuid4(),
        content=f"{attribute}: {value}",
        attribute=attribute,
        value=value,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=age_minutes),
    )


@pytest.fixture
def detector() -> ConflictDetector:
    return ConflictDetector()


@pytest.fixture
def vale_id() -> UUID:
    return uuid4()


class TestDetect:
    """Tests for detect()."""

    def test_status_contradiction(self, detector: ConflictDetector, vale_id: UUID) -> None:
        """A stored "alive" and a generated "dead" conflict."""
        stored = [_fact(vale_id, "status", "alive")]
        generated = [GeneratedStatement(vale_id, "Captain Vale died", "status", "dead")]

        conflicts = detector.detect(generated, stored, {vale_id}, {vale_id: "Captain Vale"})

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.conflict_id == Conflict.make_id(vale_id, "status")
        assert conflict.old_text == "alive"
        assert conflict.new_text == "dead"
        assert conflict.existing_fact_id == stored[0].fact_id
        assert conflict.kind is ConflictKind.STRUCTURED
        assert conflict.entity_name == "Captain Vale"
        assert conflict.resolution is ConflictResolution.UNRESOLVED

    def test_equivalent_values_do_not_conflict(
        self, detector: ConflictDetector, vale_id: UUID
    ) -> None:
        """Case, spacing and trailing punctuation are not contradictions."""
        stored = [_fact(vale_id, "status", "Alive")]
        generated = [GeneratedStatement(vale_id, "alive", "Status", "  alive. ")]

        assert detector.detect(generated, stored, {vale_id}) == []

    def test_unreferenced_entities_are_not_examined(
        self, detector: ConflictDetector, vale_id: UUID
    ) -> None:
        """Only entities the text references are compared."""
        stored = [_fact(vale_id, "status", "alive")]
        generated = [GeneratedStatement(vale_id, "dead", "status", "dead")]

        assert detector.detect(generated, stored, set()) == []
        assert detector.detect(generated, stored, {uuid4()}) == []

    def test_only_current_fact_is_compared(
        self, detector: ConflictDetector, vale_id: UUID
    ) -> None:
        """Superseded facts are history, not contradictions."""
        stored = [
            _fact(vale_id, "status", "dead", age_minutes=10),
            _fact(vale_id, "status", "alive", age_minutes=1),
        ]
        generated = [GeneratedStatement(vale_id, "alive", "status", "alive")]

        assert detector.detect(generated, stored, {vale_id}) == []

    def test_last_statement_wins(self, detector: ConflictDetector, vale_id: UUID) -> None:
        """The generator's final word on an attribute is compared."""
        stored = [_fact(vale_id, "status", "alive")]
        generated = [
            GeneratedStatement(vale_id, "dead", "status", "dead"),
            GeneratedStatement(vale_id, "alive after all", "status", "alive"),
        ]

        assert detector.detect(generated, stored, {vale_id}) == []

    def test_free_text_attribute(self, detector: ConflictDetector, vale_id: UUID) -> None:
        """Attributes outside the structured set produce free-text conflicts."""
        stored = [_fact(vale_id, "appearance", "scarred and grey-haired")]
        generated = [
            GeneratedStatement(vale_id, "young", "appearance", "young and unmarked")
        ]

        conflicts = detector.detect(generated, stored, {vale_id})

        assert [c.kind for c in conflicts] == [ConflictKind.FREE_TEXT]

    def test_prose_is_never_compared(self, detector: ConflictDetector, vale_id: UUID) -> None:
        """Statements without an attribute do not conflict."""
        stored = [_fact(vale_id, "status", "alive")]
        generated = [GeneratedStatement(vale_id, "Vale is dead and buried.")]

        assert detector.detect(generated, stored, {vale_id}) == []

    def test_no_stored_fact_no_conflict(
        self, detector: ConflictDetector, vale_id: UUID
    ) -> None:
        """A new attribute is new lore, not a contradiction."""
        generated = [GeneratedStatement(vale_id, "owns a ship", "owner", "Vale")]

        assert detector.detect(generated, [], {vale_id}) == []


class TestValuesAgree:
    """Tests for values_agree()."""

    def test_quantities_compare_numerically(self) -> None:
        """3 and 3.0 are the same quantity."""
        assert values_agree("quantity", "3", "3.0")
        assert not values_agree("quantity", "3", "4")

    def test_non_numeric_quantities_compare_as_text(self) -> None:
        """Non-numeric quantities fall back to text comparison."""
        assert values_agree("quantity", "A Dozen", "a dozen")
