"""Lore store port.

This module defines the abstract interface to the persistent store of
entities, facts and relationships. The relational schema behind it is an
external collaborator.

Store Rules:
1. SOFT DELETE - Entities are flagged deleted, never physically removed
2. CASCADE EDGES - Soft-deleting an entity deletes the relationships
   that reference it
3. APPEND-ONLY FACTS - Facts are never updated or deleted
4. ROSTER EXCLUDES DELETED - list_roster never returns deleted entities
5. FAIL LOUD - Implementations raise on errors; callers decide severity
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from loreforge.domain.models.entity import Entity, EntityWrite, RosterEntry
from loreforge.domain.models.fact import Fact, FactWrite
from loreforge.domain.models.relationship import Relationship, RelationshipWrite


class LoreStoreProtocol(Protocol):
    """Protocol for entity, fact and relationship persistence.

    Implementations may use a relational database, in-memory storage, or
    other backends. Every method is async and may be slow; callers apply
    their own timeouts.

    Methods:
        create_entity: Insert a new entity
        update_entity: Replace fields of an existing entity
        soft_delete_entity: Flag an entity deleted and drop its edges
        get_entity: Fetch one entity
        append_fact: Append a fact
        list_facts: Facts of a set of entities in append order
        create_relationship: Insert an edge
        delete_relationship: Remove an edge
        list_relationships: Edges touching an entity
        list_roster: Known-entity roster of a campaign
    """

    async def create_entity(self, entity: EntityWrite) -> Entity:
        """Insert a new entity.

        Args:
            entity: Field values; the store assigns the id.

        Returns:
            The stored entity.
        """
        ...

    async def update_entity(self, entity_id: UUID, entity: EntityWrite) -> Entity:
        """Replace the fields of an existing entity.

        Attributes are merged key by key into the stored attributes.

        Args:
            entity_id: Entity to update.
            entity: New field values.

        Returns:
            The updated entity.

        Raises:
            EntityNotFoundError: If the entity does not exist or is deleted.
        """
        ...

    async def soft_delete_entity(self, entity_id: UUID) -> Entity:
        """Flag an entity deleted and delete the relationships touching it.

        Raises:
            EntityNotFoundError: If the entity does not exist.
        """
        ...

    async def get_entity(self, entity_id: UUID) -> Entity | None:
        """Fetch an entity, including soft-deleted ones.

        Returns:
            The entity if found, None otherwise.
        """
        ...

    async def append_fact(self, fact: FactWrite) -> Fact:
        """Append a fact.

        Args:
            fact: Field values; the store assigns id and creation time.

        Returns:
            The stored fact.
        """
        ...

    async def list_facts(self, entity_ids: Iterable[UUID]) -> list[Fact]:
        """List the facts of the given entities in append order."""
        ...

    async def create_relationship(self, relationship: RelationshipWrite) -> Relationship:
        """Insert an edge.

        Raises:
            EntityNotFoundError: If an endpoint does not exist or is deleted.
        """
        ...

    async def delete_relationship(self, relationship_id: UUID) -> None:
        """Remove an edge.

        Raises:
            RelationshipNotFoundError: If the edge does not exist.
        """
        ...

    async def list_relationships(self, entity_id: UUID) -> list[Relationship]:
        """List the edges whose source or target is entity_id."""
        ...

    async def list_roster(self, campaign_id: UUID) -> list[RosterEntry]:
        """List the non-deleted entities of a campaign.

        Returns:
            Roster entries (id, name, kind, sub-kind) in creation order.
        """
        ...
