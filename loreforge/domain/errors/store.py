"""Persistent store errors raised by store adapters."""

from __future__ import annotations

from uuid import UUID

from loreforge.domain.exceptions import LoreForgeError


class StoreError(LoreForgeError):
    """Base error for persistence failures."""

    pass


class EntityNotFoundError(StoreError):
    """Raised when an entity id does not exist (or was soft-deleted)."""

    def __init__(self, entity_id: UUID) -> None:
        self.entity_id = entity_id
        super().__init__(f"Entity {entity_id} not found")


class RelationshipNotFoundError(StoreError):
    """Raised when a relationship id does not exist."""

    def __init__(self, relationship_id: UUID) -> None:
        self.relationship_id = relationship_id
        super().__init__(f"Relationship {relationship_id} not found")
