"""Unit tests for relationship type inference."""

import itertools

import pytest

from loreforge.domain.models.entity import EntityKind
from loreforge.domain.models.relationship import RelationshipKind
from loreforge.domain.services.relationship_inference import (
    child_sub_kind,
    infer,
    infer_relationship,
)


class TestInferRelationship:
    """Tests for infer_relationship()."""

    def test_every_kind_pair_has_a_relationship(self) -> None:
        """Inference is total over the closed kind set."""
        for source, target in itertools.product(EntityKind, repeat=2):
            inferred = infer_relationship(source, None, target, None)
            assert isinstance(inferred.kind, RelationshipKind)

    @pytest.mark.parametrize(
        ("source", "target", "expected", "inverted"),
        [
            (EntityKind.FACTION, EntityKind.NPC, RelationshipKind.MEMBER_OF, True),
            (EntityKind.NPC, EntityKind.FACTION, RelationshipKind.MEMBER_OF, False),
            (EntityKind.LOCATION, EntityKind.NPC, RelationshipKind.INHABITED_BY, False),
            (EntityKind.FACTION, EntityKind.LOCATION, RelationshipKind.CONTROLLED_BY, True),
            (EntityKind.ITEM, EntityKind.NPC, RelationshipKind.OWNED_BY, False),
            (EntityKind.QUEST, EntityKind.NPC, RelationshipKind.GIVEN_BY, False),
            (EntityKind.ENCOUNTER, EntityKind.CREATURE, RelationshipKind.INVOLVES, False),
            (EntityKind.NPC, EntityKind.NPC, RelationshipKind.CONNECTED_TO, False),
        ],
    )
    def test_table(
        self,
        source: EntityKind,
        target: EntityKind,
        expected: RelationshipKind,
        inverted: bool,
    ) -> None:
        """Kind pairs map to the expected kind and direction."""
        inferred = infer_relationship(source, None, target, None)

        assert inferred.kind is expected
        assert inferred.inverted is inverted

    def test_member_of_runs_from_member_to_faction(self) -> None:
        """Either discovery direction writes npc -> faction."""
        faction_id, npc_id = "faction", "npc"

        from_faction = infer_relationship(
            EntityKind.FACTION, None, EntityKind.NPC, None
        ).endpoints(faction_id, npc_id)
        from_npc = infer_relationship(
            EntityKind.NPC, None, EntityKind.FACTION, None
        ).endpoints(npc_id, faction_id)

        assert from_faction == from_npc == (npc_id, faction_id)


class TestLocationHierarchy:
    """Tests for location pairs."""

    @pytest.mark.parametrize(
        ("source_sub_kind", "target_sub_kind", "expected"),
        [
            ("settlement", "building", RelationshipKind.CONTAINS),
            ("building", "settlement", RelationshipKind.LOCATED_WITHIN),
            ("district", "district", RelationshipKind.CONNECTED_TO),
            (None, "room", RelationshipKind.CONTAINS),
            ("landmark", "building", RelationshipKind.CONTAINS),
        ],
    )
    def test_location_pairs(
        self,
        source_sub_kind: str | None,
        target_sub_kind: str | None,
        expected: RelationshipKind,
    ) -> None:
        """Larger places contain smaller ones; unknown ranks contain."""
        assert (
            infer(EntityKind.LOCATION, source_sub_kind, EntityKind.LOCATION, target_sub_kind)
            is expected
        )


class TestChildSubKind:
    """Tests for child_sub_kind()."""

    @pytest.mark.parametrize(
        ("parent", "expected"),
        [
            ("region", "settlement"),
            ("settlement", "district"),
            ("building", "room"),
            ("room", "room"),
            (None, "landmark"),
            ("floating isle", "landmark"),
        ],
    )
    def test_steps_down_the_hierarchy(self, parent: str | None, expected: str) -> None:
        """Sub-locations are one level below their parent."""
        assert child_sub_kind(parent) == expected
