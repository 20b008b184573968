"""In-memory lore store stub implementation.

This module provides an in-memory implementation of LoreStoreProtocol
for development and testing, with:
1. Soft delete that cascades to relationships
2. Configurable failure modes per operation or per entity name
3. Configurable latency to exercise commit timeouts
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from uuid import UUID, uuid4

from loreforge.application.ports.lore_store import LoreStoreProtocol
from loreforge.domain.errors.store import (
    EntityNotFoundError,
    RelationshipNotFoundError,
    StoreError,
)
from loreforge.domain.models.entity import Entity, EntityWrite, RosterEntry
from loreforge.domain.models.fact import Fact, FactWrite
from loreforge.domain.models.relationship import Relationship, RelationshipWrite


@dataclass
class FailureMode:
    """Failure and latency simulation for testing.

    Attributes:
        fail_operations: Method names that always raise StoreError.
        fail_entity_names: create_entity raises for these names
            (case-insensitive).
        delays: Method name to seconds slept before the call runs.
        slow_entity_names: Entity name (case-insensitive) to seconds
            slept before create_entity runs.
    """

    fail_operations: set[str] = field(default_factory=set)
    fail_entity_names: set[str] = field(default_factory=set)
    delays: dict[str, float] = field(default_factory=dict)
    slow_entity_names: dict[str, float] = field(default_factory=dict)


class LoreStoreStub(LoreStoreProtocol):
    """In-memory stub implementation of LoreStoreProtocol.

    NOT suitable for production use.

    Example:
        stub = LoreStoreStub()
        stub.set_failure_mode(FailureMode(fail_operations={"list_roster"}))
        # list_roster now raises StoreError
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._entities: dict[UUID, Entity] = {}
        self._facts: list[Fact] = []
        self._relationships: dict[UUID, Relationship] = {}
        self._failure_mode = FailureMode()
        self._calls: list[str] = []

    def set_failure_mode(self, mode: FailureMode) -> None:
        """Configure failure and latency simulation."""
        self._failure_mode = mode

    def clear_failure_mode(self) -> None:
        """Clear failure mode (all operations work normally)."""
        self._failure_mode = FailureMode()

    def clear(self) -> None:
        """Clear all stored data and failure modes."""
        self._entities.clear()
        self._facts.clear()
        self._relationships.clear()
        self._calls.clear()
        self._failure_mode = FailureMode()

    # Test helpers

    def add_entity(self, entity: Entity) -> Entity:
        """Seed an entity directly, bypassing failure modes."""
        self._entities[entity.entity_id] = entity
        return entity

    def add_fact(self, fact: Fact) -> Fact:
        """Seed a fact directly, bypassing failure modes."""
        self._facts.append(fact)
        return fact

    @property
    def calls(self) -> list[str]:
        """Names of the protocol methods called, in order."""
        return list(self._calls)

    @property
    def entities(self) -> list[Entity]:
        """Every stored entity, including soft-deleted ones."""
        return list(self._entities.values())

    @property
    def facts(self) -> list[Fact]:
        """Every stored fact in append order."""
        return list(self._facts)

    @property
    def relationships(self) -> list[Relationship]:
        """Every stored relationship."""
        return list(self._relationships.values())

    @property
    def row_count(self) -> int:
        """Total stored rows across entities, facts and relationships."""
        return len(self._entities) + len(self._facts) + len(self._relationships)

    # Protocol implementation

    async def create_entity(self, entity: EntityWrite) -> Entity:
        """Insert a new entity."""
        await self._enter("create_entity")
        name_key = entity.name.casefold()
        delay = self._slow_name_delay(name_key)
        if delay:
            await asyncio.sleep(delay)
        if name_key in {name.casefold() for name in self._failure_mode.fail_entity_names}:
            raise StoreError(f"Simulated create_entity failure for '{entity.name}'")
        stored = entity.to_entity(uuid4())
        self._entities[stored.entity_id] = stored
        return stored

    async def update_entity(self, entity_id: UUID, entity: EntityWrite) -> Entity:
        """Replace the fields of an existing entity, merging attributes."""
        await self._enter("update_entity")
        existing = self._live_entity(entity_id)
        updated = replace(
            existing,
            name=entity.name,
            kind=entity.kind,
            sub_kind=entity.sub_kind,
            status=entity.status,
            visibility=entity.visibility,
            summary=entity.summary,
            description=entity.description,
            attributes={**existing.attributes, **entity.attributes},
            is_stub=entity.is_stub,
            needs_review=entity.needs_review,
        )
        self._entities[entity_id] = updated
        return updated

    async def soft_delete_entity(self, entity_id: UUID) -> Entity:
        """Flag an entity deleted and delete the relationships touching it."""
        await self._enter("soft_delete_entity")
        existing = self._entities.get(entity_id)
        if existing is None:
            raise EntityNotFoundError(entity_id)
        deleted = existing.soft_deleted(datetime.now(timezone.utc))
        self._entities[entity_id] = deleted
        for relationship_id in [
            rel_id for rel_id, rel in self._relationships.items() if rel.touches(entity_id)
        ]:
            del self._relationships[relationship_id]
        return deleted

    async def get_entity(self, entity_id: UUID) -> Entity | None:
        """Fetch an entity, including soft-deleted ones."""
        await self._enter("get_entity")
        return self._entities.get(entity_id)

    async def append_fact(self, fact: FactWrite) -> Fact:
        """Append a fact."""
        await self._enter("append_fact")
        self._live_entity(fact.entity_id)
        stored = fact.to_fact(uuid4())
        self._facts.append(stored)
        return stored

    async def list_facts(self, entity_ids: Iterable[UUID]) -> list[Fact]:
        """List the facts of the given entities in append order."""
        await self._enter("list_facts")
        wanted = set(entity_ids)
        return [fact for fact in self._facts if fact.entity_id in wanted]

    async def create_relationship(self, relationship: RelationshipWrite) -> Relationship:
        """Insert an edge between two live entities."""
        await self._enter("create_relationship")
        self._live_entity(relationship.source_id)
        self._live_entity(relationship.target_id)
        stored = relationship.to_relationship(uuid4())
        self._relationships[stored.relationship_id] = stored
        return stored

    async def delete_relationship(self, relationship_id: UUID) -> None:
        """Remove an edge."""
        await self._enter("delete_relationship")
        if relationship_id not in self._relationships:
            raise RelationshipNotFoundError(relationship_id)
        del self._relationships[relationship_id]

    async def list_relationships(self, entity_id: UUID) -> list[Relationship]:
        """List the edges whose source or target is entity_id."""
        await self._enter("list_relationships")
        return [rel for rel in self._relationships.values() if rel.touches(entity_id)]

    async def list_roster(self, campaign_id: UUID) -> list[RosterEntry]:
        """List the non-deleted entities of a campaign."""
        await self._enter("list_roster")
        return [
            entity.to_roster_entry()
            for entity in self._entities.values()
            if entity.campaign_id == campaign_id and not entity.is_deleted
        ]

    async def _enter(self, operation: str) -> None:
        self._calls.append(operation)
        delay = self._failure_mode.delays.get(operation)
        if delay:
            await asyncio.sleep(delay)
        if operation in self._failure_mode.fail_operations:
            raise StoreError(f"Simulated {operation} failure")

    def _slow_name_delay(self, name_key: str) -> float:
        for name, delay in self._failure_mode.slow_entity_names.items():
            if name.casefold() == name_key:
                return delay
        return 0.0

    def _live_entity(self, entity_id: UUID) -> Entity:
        entity = self._entities.get(entity_id)
        if entity is None or entity.is_deleted:
            raise EntityNotFoundError(entity_id)
        return entity
