"""Commit coordinator service.

Persists a reviewed draft together with the Discoveries and Conflict
resolutions of its review cycle.

Commit Rules:
1. ANCHOR FIRST - The primary entity is saved first; it is the only
   fatal step. If it fails nothing else is attempted.
2. INDEPENDENT ITEMS - Every fact, stub and relationship write is
   independent: a failure or timeout becomes a CommitItemError for that
   item and never rolls back the primary entity or other items.
3. NEVER RAISE - Expected failures are reported in the CommitResult.
4. DEDUP AT COMMIT - Stubs are deduplicated against a roster read at
   commit time plus everything this commit created, so committing the
   same reviewed ledger twice never creates two stubs for one key.
5. APPEND-ONLY FACTS - A conflict resolution appends a new Fact; the
   superseded Fact is never modified.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TypeVar
from uuid import UUID

from loreforge.application.ports.lore_store import LoreStoreProtocol
from loreforge.application.services.base import LoggingMixin
from loreforge.config.discovery_config import CommitConfig
from loreforge.domain.errors.commit import CommitFatalError, CommitItemError
from loreforge.domain.models.commit import (
    CommitOperation,
    CommitResult,
    CommittedDiscovery,
    StructuralLink,
)
from loreforge.domain.models.conflict import Conflict, ConflictResolution
from loreforge.domain.models.discovery import Discovery, DiscoveryBatch, DiscoveryStatus
from loreforge.domain.models.draft import EntityDraft
from loreforge.domain.models.entity import (
    Entity,
    EntityKind,
    EntityWrite,
    HistoryEntry,
    RosterEntry,
)
from loreforge.domain.models.fact import Fact, FactSource, FactWrite
from loreforge.domain.models.relationship import (
    Relationship,
    RelationshipKind,
    RelationshipWrite,
)
from loreforge.domain.services.match_index import MatchIndex
from loreforge.domain.services.name_normalizer import normalize_name
from loreforge.domain.services.relationship_inference import (
    child_sub_kind,
    infer_relationship,
)
from loreforge.infrastructure.monitoring.discovery_metrics import (
    DiscoveryMetricsCollector,
)

T = TypeVar("T")

HISTORY_ATTRIBUTE = "history"


@dataclass
class _ItemOutcome:
    """What one independent commit task wrote."""

    created_stubs: list[Entity] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    facts: list[Fact] = field(default_factory=list)
    errors: list[CommitItemError] = field(default_factory=list)
    discovery: CommittedDiscovery | None = None


class CommitCoordinatorService(LoggingMixin):
    """Persists a reviewed draft with its Discoveries and resolutions.

    Example:
        >>> coordinator = CommitCoordinatorService(store)
        >>> result = await coordinator.commit(campaign_id, draft, discoveries, conflicts, index)
        >>> result.summary()
        'entity saved; 2 linked'
    """

    def __init__(
        self,
        store: LoreStoreProtocol,
        config: CommitConfig | None = None,
        metrics: DiscoveryMetricsCollector | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            store: Persistent store port.
            config: Timeouts and write concurrency.
            metrics: Optional metrics collector.
        """
        self._store = store
        self._config = config or CommitConfig()
        self._metrics = metrics
        self._init_logger()

    async def commit(
        self,
        campaign_id: UUID,
        draft: EntityDraft,
        discoveries: Iterable[Discovery],
        conflicts: Iterable[Conflict],
        index: MatchIndex,
    ) -> CommitResult:
        """Commit a reviewed draft.

        Args:
            campaign_id: Campaign the draft belongs to.
            draft: The primary entity.
            discoveries: Ledger contents; only CREATE_STUB and
                LINK_EXISTING Discoveries are acted on.
            conflicts: Conflicts of the cycle; unresolved ones are skipped.
            index: Session match index. Entities created by this commit
                are registered in it.

        Returns:
            CommitResult; never raises for store failures.
        """
        log = self._log_operation(
            "commit",
            campaign_id=str(campaign_id),
            entity_name=draft.name,
            completes_stub=draft.completes_stub,
        )
        log.info("commit_started")

        try:
            entity = await self._save_anchor(campaign_id, draft)
        except Exception as exc:
            fatal = CommitFatalError(draft.name, _describe(exc, self._config))
            log.error("commit_anchor_failed", **fatal.to_dict())
            result = CommitResult.failed(fatal)
            self._record(result)
            return result

        index.register(entity.to_roster_entry())
        commit_index = await self._refresh_index(campaign_id, index)
        commit_index.register(entity.to_roster_entry())

        semaphore = asyncio.Semaphore(self._config.max_concurrent_writes)
        tasks: list[Awaitable[_ItemOutcome]] = []
        tasks.extend(self._statement_tasks(semaphore, campaign_id, entity, draft))
        tasks.extend(self._anchor_link_tasks(semaphore, campaign_id, entity, draft))
        tasks.extend(self._conflict_tasks(semaphore, campaign_id, conflicts))
        for discovery in DiscoveryBatch(discoveries):
            if discovery.status.is_committable:
                tasks.append(
                    self._commit_discovery(
                        semaphore, campaign_id, entity, draft, discovery, commit_index, index
                    )
                )

        outcomes = await asyncio.gather(*tasks)

        result = CommitResult(success=True, entity=entity)
        for outcome in outcomes:
            result.created_stubs.extend(outcome.created_stubs)
            result.relationships.extend(outcome.relationships)
            result.facts.extend(outcome.facts)
            result.errors.extend(outcome.errors)
            if outcome.discovery is not None:
                result.outcomes[outcome.discovery.key] = outcome.discovery

        self._record(result)
        if result.errors:
            log.warning(
                "commit_partially_failed",
                entity_id=str(entity.entity_id),
                failure_count=len(result.errors),
                summary=result.summary(),
            )
        else:
            log.info(
                "commit_completed",
                entity_id=str(entity.entity_id),
                stubs_created=len(result.created_stubs),
                relationships_created=len(result.relationships),
                facts_written=len(result.facts),
            )
        return result

    async def link_structural(
        self,
        campaign_id: UUID,
        result: CommitResult,
        links: Iterable[StructuralLink],
    ) -> list[Relationship]:
        """Write edges implied by structure between committed Discoveries.

        Keys resolve through result.entity_ids_by_key. Created edges and
        per-link errors are appended to result.

        Args:
            campaign_id: Campaign of the commit.
            result: A successful commit result.
            links: Edges to add.

        Returns:
            The relationships created.
        """
        log = self._log_operation("link_structural", campaign_id=str(campaign_id))
        if not result.success:
            log.warning("link_structural_skipped", reason="commit failed")
            return []

        ids = result.entity_ids_by_key
        semaphore = asyncio.Semaphore(self._config.max_concurrent_writes)

        async def write(link: StructuralLink) -> _ItemOutcome:
            outcome = _ItemOutcome()
            item_key = f"{link.source_key}->{link.target_key}"
            source_id = ids.get(link.source_key)
            target_id = ids.get(link.target_key)
            if source_id is None or target_id is None or source_id == target_id:
                error = CommitItemError(
                    item_key,
                    CommitOperation.CREATE_RELATIONSHIP.value,
                    "both ends must be distinct committed discoveries",
                )
                log.warning("commit_item_failed", **error.to_dict())
                outcome.errors.append(error)
                return outcome
            relationship = await self._guarded(
                semaphore,
                outcome,
                item_key,
                CommitOperation.CREATE_RELATIONSHIP,
                lambda: self._store.create_relationship(
                    RelationshipWrite(
                        campaign_id=campaign_id,
                        source_id=source_id,
                        target_id=target_id,
                        kind=link.kind,
                        description=link.description,
                    )
                ),
            )
            if relationship is not None:
                outcome.relationships.append(relationship)
            return outcome

        created: list[Relationship] = []
        for outcome in await asyncio.gather(*(write(link) for link in links)):
            created.extend(outcome.relationships)
            result.errors.extend(outcome.errors)
        result.relationships.extend(created)
        log.info("link_structural_completed", relationships_created=len(created))
        return created

    # Anchor

    async def _save_anchor(self, campaign_id: UUID, draft: EntityDraft) -> Entity:
        if draft.existing_stub_id is None:
            return await self._call(
                lambda: self._store.create_entity(
                    _draft_write(campaign_id, draft, dict(draft.attributes))
                )
            )

        stub_id = draft.existing_stub_id
        existing = await self._call(lambda: self._store.get_entity(stub_id))
        if existing is None or existing.is_deleted:
            raise LookupError(f"stub {stub_id} no longer exists")
        history = list(existing.attributes.get(HISTORY_ATTRIBUTE, []))
        history.append(
            HistoryEntry(
                event="fleshed_out",
                note=f"Stub completed as {draft.kind.value}",
                entity_id=draft.source_entity_id,
                entity_name=draft.source_entity_name,
            ).to_dict()
        )
        attributes = {**draft.attributes, HISTORY_ATTRIBUTE: history}
        return await self._call(
            lambda: self._store.update_entity(
                stub_id, _draft_write(campaign_id, draft, attributes)
            )
        )

    async def _refresh_index(self, campaign_id: UUID, index: MatchIndex) -> MatchIndex:
        """Read the roster at commit time, falling back to the session index."""
        try:
            roster = await self._call(lambda: self._store.list_roster(campaign_id))
        except Exception as exc:
            self._log_operation("commit", campaign_id=str(campaign_id)).warning(
                "commit_roster_refresh_failed",
                reason=_describe(exc, self._config),
            )
            return MatchIndex(index.entries(), index.config)
        commit_index = MatchIndex(roster, index.config)
        for entry in index.entries():
            if commit_index.entry(entry.entity_id) is None:
                commit_index.register(entry)
        return commit_index

    # Independent items

    def _statement_tasks(
        self,
        semaphore: asyncio.Semaphore,
        campaign_id: UUID,
        entity: Entity,
        draft: EntityDraft,
    ) -> list[Awaitable[_ItemOutcome]]:
        async def write(position: int, fact_write: FactWrite) -> _ItemOutcome:
            outcome = _ItemOutcome()
            fact = await self._guarded(
                semaphore,
                outcome,
                f"statement:{position}",
                CommitOperation.APPEND_FACT,
                lambda: self._store.append_fact(fact_write),
            )
            if fact is not None:
                outcome.facts.append(fact)
            return outcome

        return [
            write(
                position,
                FactWrite(
                    entity_id=entity.entity_id,
                    campaign_id=campaign_id,
                    content=statement.content,
                    category=statement.category,
                    visibility=statement.visibility,
                    attribute=statement.attribute,
                    value=statement.value,
                    source=FactSource.GENERATED,
                ),
            )
            for position, statement in enumerate(draft.statements)
            if statement.content.strip()
        ]

    def _anchor_link_tasks(
        self,
        semaphore: asyncio.Semaphore,
        campaign_id: UUID,
        entity: Entity,
        draft: EntityDraft,
    ) -> list[Awaitable[_ItemOutcome]]:
        edges: list[tuple[str, RelationshipWrite]] = [
            (
                f"anchor:{link.target_id}",
                RelationshipWrite(
                    campaign_id=campaign_id,
                    source_id=entity.entity_id,
                    target_id=link.target_id,
                    kind=link.kind,
                    description=link.description,
                ),
            )
            for link in draft.anchor_links
            if link.target_id != entity.entity_id
        ]
        if (
            draft.completes_stub
            and draft.source_entity_id is not None
            and draft.source_entity_id != entity.entity_id
        ):
            edges.append(
                (
                    "mentioned_in",
                    RelationshipWrite(
                        campaign_id=campaign_id,
                        source_id=entity.entity_id,
                        target_id=draft.source_entity_id,
                        kind=RelationshipKind.MENTIONED_IN,
                        description=(
                            f"First mentioned in {draft.source_entity_name}"
                            if draft.source_entity_name
                            else None
                        ),
                    ),
                )
            )

        async def write(item_key: str, edge: RelationshipWrite) -> _ItemOutcome:
            outcome = _ItemOutcome()
            relationship = await self._guarded(
                semaphore,
                outcome,
                item_key,
                CommitOperation.CREATE_RELATIONSHIP,
                lambda: self._store.create_relationship(edge),
            )
            if relationship is not None:
                outcome.relationships.append(relationship)
            return outcome

        return [write(item_key, edge) for item_key, edge in edges]

    def _conflict_tasks(
        self,
        semaphore: asyncio.Semaphore,
        campaign_id: UUID,
        conflicts: Iterable[Conflict],
    ) -> list[Awaitable[_ItemOutcome]]:
        async def write(conflict: Conflict, fact_write: FactWrite) -> _ItemOutcome:
            outcome = _ItemOutcome()
            fact = await self._guarded(
                semaphore,
                outcome,
                conflict.conflict_id,
                CommitOperation.APPEND_FACT,
                lambda: self._store.append_fact(fact_write),
            )
            if fact is not None:
                outcome.facts.append(fact)
            return outcome

        tasks: list[Awaitable[_ItemOutcome]] = []
        for conflict in conflicts:
            kept = conflict.kept_value()
            if kept is None:
                continue
            supersedes = (
                None
                if conflict.resolution is ConflictResolution.KEEP_OLD
                else conflict.existing_fact_id
            )
            tasks.append(
                write(
                    conflict,
                    FactWrite(
                        entity_id=conflict.entity_id,
                        campaign_id=campaign_id,
                        content=f"{conflict.attribute}: {kept}",
                        attribute=conflict.attribute,
                        value=kept,
                        source=FactSource.CONFLICT_RESOLUTION,
                        supersedes_fact_id=supersedes,
                    ),
                )
            )
        return tasks

    async def _commit_discovery(
        self,
        semaphore: asyncio.Semaphore,
        campaign_id: UUID,
        entity: Entity,
        draft: EntityDraft,
        discovery: Discovery,
        commit_index: MatchIndex,
        session_index: MatchIndex,
    ) -> _ItemOutcome:
        """Create or resolve the entity of one Discovery and link it."""
        outcome = _ItemOutcome()
        status = discovery.status
        target_id = discovery.link_target_id if status is DiscoveryStatus.LINK_EXISTING else None

        if status is DiscoveryStatus.CREATE_STUB:
            match = commit_index.match(discovery.name)
            if match.is_exact and match.entity_id is not None:
                # Already exists: created earlier or by a previous commit
                status = DiscoveryStatus.LINK_EXISTING
                target_id = match.entity_id

        if target_id == entity.entity_id or (
            target_id is None and discovery.key == normalize_name(entity.name)
        ):
            outcome.discovery = CommittedDiscovery(
                key=discovery.key,
                entity_id=entity.entity_id,
                status=DiscoveryStatus.COMMITTED,
            )
            return outcome

        created_stub = False
        if target_id is None:
            stub = await self._guarded(
                semaphore,
                outcome,
                discovery.key,
                CommitOperation.CREATE_STUB,
                lambda: self._store.create_entity(_stub_write(campaign_id, entity, draft, discovery)),
            )
            if stub is None:
                outcome.discovery = CommittedDiscovery(
                    key=discovery.key, entity_id=None, status=status
                )
                return outcome
            created_stub = True
            target_id = stub.entity_id
            outcome.created_stubs.append(stub)
            entry = stub.to_roster_entry()
            commit_index.register(entry)
            session_index.register(entry)

        target_entry = commit_index.entry(target_id) or session_index.entry(target_id)
        target_kind, target_sub_kind = _kind_of(target_entry, discovery)
        inferred = infer_relationship(entity.kind, entity.sub_kind, target_kind, target_sub_kind)
        source_id, edge_target_id = inferred.endpoints(entity.entity_id, target_id)
        relationship = await self._guarded(
            semaphore,
            outcome,
            discovery.key,
            CommitOperation.CREATE_RELATIONSHIP,
            lambda: self._store.create_relationship(
                RelationshipWrite(
                    campaign_id=campaign_id,
                    source_id=source_id,
                    target_id=edge_target_id,
                    kind=inferred.kind,
                    description=discovery.context or None,
                )
            ),
        )
        if relationship is not None:
            outcome.relationships.append(relationship)
            status = DiscoveryStatus.COMMITTED
        outcome.discovery = CommittedDiscovery(
            key=discovery.key,
            entity_id=target_id,
            status=status,
            created_stub=created_stub,
            relationship_id=relationship.relationship_id if relationship else None,
        )
        return outcome

    # Store call helpers

    async def _call(self, factory: Callable[[], Awaitable[T]]) -> T:
        return await asyncio.wait_for(
            factory(), timeout=self._config.persistence_timeout_seconds
        )

    async def _guarded(
        self,
        semaphore: asyncio.Semaphore,
        outcome: _ItemOutcome,
        item_key: str,
        operation: CommitOperation,
        factory: Callable[[], Awaitable[T]],
    ) -> T | None:
        """Run one independent write, recording a failure as an item error."""
        async with semaphore:
            try:
                return await self._call(factory)
            except Exception as exc:
                error = CommitItemError(
                    item_key,
                    operation.value,
                    _describe(exc, self._config),
                    timed_out=isinstance(exc, TimeoutError),
                )
                self._log_operation("commit").warning(
                    "commit_item_failed", **error.to_dict()
                )
                outcome.errors.append(error)
                return None

    def _record(self, result: CommitResult) -> None:
        if self._metrics is not None:
            self._metrics.record_commit(result)


def _describe(exc: BaseException, config: CommitConfig) -> str:
    if isinstance(exc, TimeoutError):
        return f"timed out after {config.persistence_timeout_seconds}s"
    return str(exc) or type(exc).__name__


def _draft_write(
    campaign_id: UUID, draft: EntityDraft, attributes: dict[str, object]
) -> EntityWrite:
    return EntityWrite(
        campaign_id=campaign_id,
        name=draft.name,
        kind=draft.kind,
        sub_kind=draft.sub_kind,
        status=draft.status,
        visibility=draft.visibility,
        summary=draft.summary,
        description=draft.description,
        attributes=attributes,
        is_stub=False,
        needs_review=False,
    )


def _stub_write(
    campaign_id: UUID, entity: Entity, draft: EntityDraft, discovery: Discovery
) -> EntityWrite:
    sub_kind = None
    if entity.kind is EntityKind.LOCATION and discovery.origin_field == "contains":
        sub_kind = child_sub_kind(draft.sub_kind)
    return EntityWrite(
        campaign_id=campaign_id,
        name=discovery.name,
        kind=discovery.suggested_kind,
        sub_kind=sub_kind,
        summary=discovery.context,
        attributes={
            "stub_context": discovery.context,
            "source_entity_id": str(entity.entity_id),
            "source_entity_name": entity.name,
            "origin_field": discovery.origin_field,
            HISTORY_ATTRIBUTE: [
                HistoryEntry(
                    event="stub_created",
                    note=f"Discovered while authoring {entity.name}",
                    entity_id=entity.entity_id,
                    entity_name=entity.name,
                ).to_dict()
            ],
        },
        is_stub=True,
        needs_review=True,
    )


def _kind_of(
    entry: RosterEntry | None, discovery: Discovery
) -> tuple[EntityKind, str | None]:
    if entry is None:
        return discovery.suggested_kind, None
    return entry.kind, entry.sub_kind
