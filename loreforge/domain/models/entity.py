"""Entity domain models.

An Entity is any tracked game object owned by a campaign. Entities are
created by a commit or by direct edit and are soft-deleted only: the
deleted_at flag is set, the row is never physically removed.

Constraints:
- EntityKind is a closed enumeration; unknown kinds map to UNCLASSIFIED
- Stubs carry is_stub and needs_review until a human completes them
- Roster queries only ever see (id, name, kind, sub_kind)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class EntityKind(Enum):
    """Closed set of tracked game object kinds."""

    NPC = "npc"
    LOCATION = "location"
    ITEM = "item"
    FACTION = "faction"
    QUEST = "quest"
    CREATURE = "creature"
    ENCOUNTER = "encounter"
    UNCLASSIFIED = "unclassified"

    @classmethod
    def parse(cls, value: str | EntityKind | None) -> EntityKind:
        """Parse a loosely typed kind, falling back to UNCLASSIFIED.

        Generator output and legacy rows use "other" and "monster" for
        what this enumeration calls UNCLASSIFIED and CREATURE.

        Args:
            value: Raw kind value.

        Returns:
            The matching EntityKind.
        """
        if isinstance(value, EntityKind):
            return value
        if not value:
            return cls.UNCLASSIFIED
        normalized = str(value).strip().lower()
        normalized = _KIND_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNCLASSIFIED


_KIND_ALIASES: dict[str, str] = {
    "other": "unclassified",
    "monster": "creature",
    "character": "npc",
    "place": "location",
    "organization": "faction",
}


class LifecycleStatus(Enum):
    """Lifecycle status of an entity in the world."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    DECEASED = "deceased"
    DESTROYED = "destroyed"
    MISSING = "missing"


class Visibility(Enum):
    """Who may see an entity, fact or relationship."""

    PUBLIC = "public"
    LIMITED = "limited"
    DM_ONLY = "dm_only"


@dataclass(frozen=True)
class HistoryEntry:
    """Provenance entry stored in an entity's history attribute."""

    event: str
    note: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity_id: UUID | None = None
    entity_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "event": self.event,
            "note": self.note,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.entity_id is not None:
            data["entity_id"] = str(self.entity_id)
        if self.entity_name is not None:
            data["entity_name"] = self.entity_name
        return data


@dataclass(frozen=True)
class Entity:
    """A persisted game object.

    Attributes:
        entity_id: Unique identifier.
        campaign_id: Owning campaign.
        name: Display name.
        kind: Closed kind enumeration.
        sub_kind: Free-form refinement (e.g. "settlement", "elf").
        status: Lifecycle status.
        visibility: Visibility scope.
        summary: Short free-text summary.
        description: Long free-text description.
        attributes: Structured fields, including stub flags and history.
        is_stub: True for auto-created placeholder entities.
        needs_review: True until a human has reviewed the entity.
        created_at: Creation timestamp (UTC).
        deleted_at: Soft-delete timestamp, None while live.
    """

    entity_id: UUID
    campaign_id: UUID
    name: str
    kind: EntityKind
    sub_kind: str | None = None
    status: LifecycleStatus = LifecycleStatus.ACTIVE
    visibility: Visibility = Visibility.DM_ONLY
    summary: str = ""
    description: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    is_stub: bool = False
    needs_review: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        """True once the entity has been soft-deleted."""
        return self.deleted_at is not None

    def soft_deleted(self, at: datetime | None = None) -> Entity:
        """Return a copy flagged as deleted."""
        return replace(self, deleted_at=at or datetime.now(timezone.utc))

    def to_roster_entry(self) -> RosterEntry:
        """Project onto the roster shape."""
        return RosterEntry(
            entity_id=self.entity_id,
            name=self.name,
            kind=self.kind,
            sub_kind=self.sub_kind,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "entity_id": str(self.entity_id),
            "campaign_id": str(self.campaign_id),
            "name": self.name,
            "kind": self.kind.value,
            "sub_kind": self.sub_kind,
            "status": self.status.value,
            "visibility": self.visibility.value,
            "summary": self.summary,
            "description": self.description,
            "attributes": dict(self.attributes),
            "is_stub": self.is_stub,
            "needs_review": self.needs_review,
            "created_at": self.created_at.isoformat(),
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
        }


@dataclass(frozen=True)
class RosterEntry:
    """Known-entity roster row used to build the match index."""

    entity_id: UUID
    name: str
    kind: EntityKind
    sub_kind: str | None = None


@dataclass(frozen=True)
class EntityWrite:
    """Field values for an entity insert or update.

    The store assigns entity_id on insert. On update, the fields replace
    the stored ones and attributes are merged key by key.
    """

    campaign_id: UUID
    name: str
    kind: EntityKind
    sub_kind: str | None = None
    status: LifecycleStatus = LifecycleStatus.ACTIVE
    visibility: Visibility = Visibility.DM_ONLY
    summary: str = ""
    description: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    is_stub: bool = False
    needs_review: bool = False

    def to_entity(self, entity_id: UUID | None = None) -> Entity:
        """Materialize as an Entity with the given (or a fresh) id."""
        return Entity(
            entity_id=entity_id or uuid4(),
            campaign_id=self.campaign_id,
            name=self.name,
            kind=self.kind,
            sub_kind=self.sub_kind,
            status=self.status,
            visibility=self.visibility,
            summary=self.summary,
            description=self.description,
            attributes=dict(self.attributes),
            is_stub=self.is_stub,
            needs_review=self.needs_review,
        )
