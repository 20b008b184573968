"""Primary entity draft models.

The draft is the entity the user is authoring in the current review
cycle. It is the anchor of a commit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from loreforge.domain.models.entity import EntityKind, LifecycleStatus, Visibility
from loreforge.domain.models.fact import FactCategory
from loreforge.domain.models.relationship import RelationshipKind


@dataclass(frozen=True)
class DraftStatement:
    """A generated statement about the draft entity itself."""

    content: str
    category: FactCategory = FactCategory.LORE
    visibility: Visibility = Visibility.DM_ONLY
    attribute: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class AnchorLink:
    """An explicit edge from the draft to a chosen existing entity.

    Covers owner, location, faction and parent-location picks made
    before generation.
    """

    target_id: UUID
    kind: RelationshipKind
    description: str | None = None


@dataclass(frozen=True)
class EntityDraft:
    """The primary entity about to be committed.

    Attributes:
        name: Entity name.
        kind: Entity kind.
        sub_kind: Optional sub-kind.
        summary: Short summary.
        description: Long description.
        attributes: Structured generated fields.
        visibility: Visibility scope.
        status: Lifecycle status.
        statements: Generated statements about this entity.
        anchor_links: Explicit edges to existing entities.
        existing_stub_id: When set, the commit completes this stub
            instead of inserting a new entity.
        source_entity_id: Entity whose text first mentioned the stub.
        source_entity_name: Name of that entity.
    """

    name: str
    kind: EntityKind
    sub_kind: str | None = None
    summary: str = ""
    description: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    visibility: Visibility = Visibility.DM_ONLY
    status: LifecycleStatus = LifecycleStatus.ACTIVE
    statements: tuple[DraftStatement, ...] = ()
    anchor_links: tuple[AnchorLink, ...] = ()
    existing_stub_id: UUID | None = None
    source_entity_id: UUID | None = None
    source_entity_name: str | None = None

    @property
    def completes_stub(self) -> bool:
        """True when the commit updates an existing stub."""
        return self.existing_stub_id is not None
