"""Relationship type inference.

Maps a pair of entity kinds to the relationship kind that links them and
the direction the edge is written in. The mapping is one data table, so
the result is the same whichever kind originated the discovery.

The function is total: any pair missing from the table is CONNECTED_TO.
"""

from __future__ import annotations

from dataclasses import dataclass

from loreforge.domain.models.entity import EntityKind
from loreforge.domain.models.relationship import RelationshipKind

# Location sub-kinds from largest to smallest
LOCATION_HIERARCHY: tuple[str, ...] = ("region", "settlement", "district", "building", "room")

_CHILD_SUB_KIND: dict[str, str] = {
    "region": "settlement",
    "settlement": "district",
    "district": "building",
    "building": "room",
    "dungeon": "room",
    "landmark": "room",
    "room": "room",
}

_DEFAULT_CHILD_SUB_KIND = "landmark"


@dataclass(frozen=True)
class InferredRelationship:
    """Relationship kind and direction for an entity pair.

    Attributes:
        kind: Relationship kind.
        inverted: True when the edge runs target -> source.
    """

    kind: RelationshipKind
    inverted: bool = False

    def endpoints(self, source_id: object, target_id: object) -> tuple[object, object]:
        """Order two ids as (edge source, edge target)."""
        if self.inverted:
            return target_id, source_id
        return source_id, target_id


_CONNECTED = InferredRelationship(RelationshipKind.CONNECTED_TO)

_RELATIONSHIP_TABLE: dict[tuple[EntityKind, EntityKind], InferredRelationship] = {
    (EntityKind.LOCATION, EntityKind.NPC): InferredRelationship(RelationshipKind.INHABITED_BY),
    (EntityKind.LOCATION, EntityKind.CREATURE): InferredRelationship(
        RelationshipKind.INHABITED_BY
    ),
    (EntityKind.LOCATION, EntityKind.FACTION): InferredRelationship(
        RelationshipKind.CONTROLLED_BY
    ),
    (EntityKind.LOCATION, EntityKind.ITEM): InferredRelationship(RelationshipKind.CONTAINS),
    (EntityKind.FACTION, EntityKind.NPC): InferredRelationship(
        RelationshipKind.MEMBER_OF, inverted=True
    ),
    (EntityKind.FACTION, EntityKind.LOCATION): InferredRelationship(
        RelationshipKind.CONTROLLED_BY, inverted=True
    ),
    (EntityKind.NPC, EntityKind.FACTION): InferredRelationship(RelationshipKind.MEMBER_OF),
    (EntityKind.NPC, EntityKind.LOCATION): InferredRelationship(
        RelationshipKind.INHABITED_BY, inverted=True
    ),
    (EntityKind.ITEM, EntityKind.NPC): InferredRelationship(RelationshipKind.OWNED_BY),
    (EntityKind.ITEM, EntityKind.LOCATION): InferredRelationship(RelationshipKind.LOCATED_IN),
    (EntityKind.QUEST, EntityKind.LOCATION): InferredRelationship(
        RelationshipKind.TAKES_PLACE_AT
    ),
    (EntityKind.QUEST, EntityKind.NPC): InferredRelationship(RelationshipKind.GIVEN_BY),
    (EntityKind.QUEST, EntityKind.CREATURE): InferredRelationship(RelationshipKind.INVOLVES),
    (EntityKind.ENCOUNTER, EntityKind.LOCATION): InferredRelationship(
        RelationshipKind.TAKES_PLACE_AT
    ),
    (EntityKind.ENCOUNTER, EntityKind.CREATURE): InferredRelationship(
        RelationshipKind.INVOLVES
    ),
}


def _hierarchy_rank(sub_kind: str | None) -> int | None:
    if not sub_kind:
        return None
    try:
        return LOCATION_HIERARCHY.index(sub_kind.strip().lower())
    except ValueError:
        return None


def _infer_location_pair(
    source_sub_kind: str | None, target_sub_kind: str | None
) -> InferredRelationship:
    source_rank = _hierarchy_rank(source_sub_kind)
    target_rank = _hierarchy_rank(target_sub_kind)
    if source_rank is None or target_rank is None or source_rank < target_rank:
        return InferredRelationship(RelationshipKind.CONTAINS)
    if source_rank == target_rank:
        return _CONNECTED
    # Source is the smaller place: it sits within the target
    return InferredRelationship(RelationshipKind.LOCATED_WITHIN)


def infer_relationship(
    source_kind: EntityKind,
    source_sub_kind: str | None,
    target_kind: EntityKind,
    target_sub_kind: str | None,
) -> InferredRelationship:
    """Infer kind and direction of the edge between two entities.

    Args:
        source_kind: Kind of the originating (authored) entity.
        source_sub_kind: Its sub-kind, if any.
        target_kind: Kind of the discovered entity.
        target_sub_kind: Its sub-kind, if any.

    Returns:
        InferredRelationship; CONNECTED_TO for unmapped pairs.
    """
    if source_kind is EntityKind.LOCATION and target_kind is EntityKind.LOCATION:
        return _infer_location_pair(source_sub_kind, target_sub_kind)
    return _RELATIONSHIP_TABLE.get((source_kind, target_kind), _CONNECTED)


def infer(
    source_kind: EntityKind,
    source_sub_kind: str | None,
    target_kind: EntityKind,
    target_sub_kind: str | None,
) -> RelationshipKind:
    """Infer only the relationship kind between two entities."""
    return infer_relationship(source_kind, source_sub_kind, target_kind, target_sub_kind).kind


def child_sub_kind(parent_sub_kind: str | None) -> str:
    """Sub-kind for a location discovered inside a parent location.

    Args:
        parent_sub_kind: Sub-kind of the containing location.

    Returns:
        Next step down the hierarchy, "landmark" when unknown.
    """
    if not parent_sub_kind:
        return _DEFAULT_CHILD_SUB_KIND
    return _CHILD_SUB_KIND.get(parent_sub_kind.strip().lower(), _DEFAULT_CHILD_SUB_KIND)
