"""Relationship (edge) domain models.

Edges connect two entities of one campaign. They are created by a commit
or by an explicit user action and are deleted only together with one of
their endpoint entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class RelationshipKind(Enum):
    """Canonical relationship labels."""

    CONNECTED_TO = "connected_to"
    CONTAINS = "contains"
    LOCATED_WITHIN = "located_within"
    LOCATED_IN = "located_in"
    INHABITED_BY = "inhabited_by"
    CONTROLLED_BY = "controlled_by"
    MEMBER_OF = "member_of"
    OWNED_BY = "owned_by"
    TAKES_PLACE_AT = "takes_place_at"
    GIVEN_BY = "given_by"
    INVOLVES = "involves"
    MENTIONED_IN = "mentioned_in"


@dataclass(frozen=True)
class RelationshipWrite:
    """Field values for an edge insert. The store assigns the id."""

    campaign_id: UUID
    source_id: UUID
    target_id: UUID
    kind: RelationshipKind
    description: str | None = None
    is_active: bool = True

    def to_relationship(self, relationship_id: UUID | None = None) -> Relationship:
        """Materialize as a Relationship with the given (or a fresh) id."""
        return Relationship(
            relationship_id=relationship_id or uuid4(),
            campaign_id=self.campaign_id,
            source_id=self.source_id,
            target_id=self.target_id,
            kind=self.kind,
            description=self.description,
            is_active=self.is_active,
        )


@dataclass(frozen=True)
class Relationship:
    """A stored edge between two entities."""

    relationship_id: UUID
    campaign_id: UUID
    source_id: UUID
    target_id: UUID
    kind: RelationshipKind
    description: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touches(self, entity_id: UUID) -> bool:
        """True if entity_id is either endpoint."""
        return entity_id in (self.source_id, self.target_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "relationship_id": str(self.relationship_id),
            "campaign_id": str(self.campaign_id),
            "source_id": str(self.source_id),
            "target_id": str(self.target_id),
            "kind": self.kind.value,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
        }
