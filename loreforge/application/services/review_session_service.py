"""Review session service.

Opens one generation-review-commit cycle per authored entity. A session
owns its Discovery ledger, its Conflicts and the match index built from
the campaign roster; nothing is persisted until commit().

Review Rules:
1. DEGRADE, DON'T ABORT - Scan and roster failures are logged as
   warnings and yield empty results; the review always continues
2. ADVISORY FUZZY MATCHES - Fuzzy hits annotate a Discovery with a
   suggested entity; only the reviewer links
3. NOTHING WRITTEN BEFORE COMMIT - discard() is a pure in-memory reset
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from uuid import UUID, uuid4

from loreforge.application.dtos.generated_content import GeneratedContent
from loreforge.application.ports.lore_store import LoreStoreProtocol
from loreforge.application.services.base import LoggingMixin
from loreforge.application.services.commit_coordinator_service import (
    CommitCoordinatorService,
)
from loreforge.config.discovery_config import DiscoveryConfig
from loreforge.domain.errors.conflict import (
    ConflictNotFoundError,
    InvalidConflictResolutionError,
)
from loreforge.domain.errors.discovery import MatchIndexError, ScanError
from loreforge.domain.errors.review import ReviewSessionClosedError
from loreforge.domain.errors.store import EntityNotFoundError
from loreforge.domain.models.commit import CommitResult, StructuralLink
from loreforge.domain.models.conflict import Conflict, ConflictResolution
from loreforge.domain.models.discovery import (
    Discovery,
    DiscoveryBatch,
    DiscoverySource,
    DiscoveryStatus,
)
from loreforge.domain.models.draft import EntityDraft
from loreforge.domain.models.entity import EntityKind
from loreforge.domain.models.fact import GeneratedStatement
from loreforge.domain.models.relationship import Relationship
from loreforge.domain.models.review import CanonScore, ExistingMention, ReviewState
from loreforge.domain.services.conflict_detector import ConflictDetector
from loreforge.domain.services.discovery_ledger import DiscoveryLedger
from loreforge.domain.services.match_index import MatchIndex, MatchKind
from loreforge.domain.services.mention_scanner import MentionScanner, infer_kind
from loreforge.domain.services.name_normalizer import clean_name, normalize_name
from loreforge.domain.services.structured_extractor import StructuredExtractor
from loreforge.infrastructure.monitoring.discovery_metrics import (
    DiscoveryMetricsCollector,
)
from loreforge.infrastructure.observability.correlation import (
    generate_correlation_id,
    set_correlation_id,
)

MANUAL_SELECTION_CONTEXT = "Manually selected"
MANUAL_LINK_CONTEXT = "Manually linked"


class ReviewSession(LoggingMixin):
    """One generation-review-commit cycle.

    Single-user and single-task: the ledger is never shared, so the
    session takes no locks.
    """

    def __init__(
        self,
        campaign_id: UUID,
        authoring: str | None,
        index: MatchIndex,
        store: LoreStoreProtocol,
        coordinator: CommitCoordinatorService,
        config: DiscoveryConfig,
        correlation_id: str,
        metrics: DiscoveryMetricsCollector | None = None,
    ) -> None:
        """Initialize the session. Use ReviewSessionService.open_session()."""
        self.session_id = uuid4()
        self.campaign_id = campaign_id
        self.authoring = authoring
        self.correlation_id = correlation_id
        self._index = index
        self._store = store
        self._coordinator = coordinator
        self._config = config
        self._metrics = metrics
        self._scanner = MentionScanner(config.scanner)
        self._extractor = StructuredExtractor()
        self._detector = ConflictDetector()
        self._ledger = DiscoveryLedger()
        self._conflicts: dict[str, Conflict] = {}
        self._mentions: list[ExistingMention] = []
        self._state = ReviewState.OPEN
        self._init_logger()

    @property
    def state(self) -> ReviewState:
        """Current lifecycle state."""
        return self._state

    @property
    def index(self) -> MatchIndex:
        """Match index of this session."""
        return self._index

    # Ingestion

    def ingest_narrative(self, text: str) -> list[Discovery]:
        """Scan narrative text and fold its Discoveries into the ledger.

        Args:
            text: Generated narrative text.

        Returns:
            Ledger contents after the scan.
        """
        self._ensure_open()
        log = self._log_operation("ingest_narrative", session_id=str(self.session_id))
        try:
            scanned = self._scanner.scan(text, self._index.known_keys, self.authoring)
            spans = self._scanner.find_mentions(text, self.authoring)
        except ScanError as exc:
            log.warning("scan_failed", reason=exc.reason)
            if self._metrics is not None:
                self._metrics.record_scan_failure()
            return self.current_discoveries()

        seen = {(m.entity_id, m.start, m.end) for m in self._mentions}
        for span in spans:
            match = self._index.match(span.text)
            if not match.is_exact or match.entry is None:
                continue
            if (match.entry.entity_id, span.start, span.end) in seen:
                continue
            seen.add((match.entry.entity_id, span.start, span.end))
            self._mentions.append(
                ExistingMention(
                    entity_id=match.entry.entity_id,
                    name=match.entry.name,
                    kind=match.entry.kind,
                    start=span.start,
                    end=span.end,
                )
            )

        self._apply(self._annotate(scanned), DiscoverySource.SCAN)
        log.info(
            "scan_completed",
            discoveries_found=len(scanned),
            existing_mentions=len(self._mentions),
        )
        return self.current_discoveries()

    def ingest_structured(self, content: GeneratedContent) -> list[Discovery]:
        """Fold structured sub-objects and the narrative of content in.

        Args:
            content: Validated generator output.

        Returns:
            Ledger contents after ingestion.
        """
        self._ensure_open()
        # The authored entity never discovers itself
        self.authoring = self.authoring or content.name
        extracted = self._extractor.extract(
            self.authoring, content.structured_entries(), self._index.known_keys
        )
        self._apply(self._annotate(extracted), DiscoverySource.STRUCTURED)
        self._log_operation(
            "ingest_structured", session_id=str(self.session_id)
        ).info("structured_extracted", discoveries_found=len(extracted))
        return self.ingest_narrative(content.narrative_text())

    async def ingest_generated_facts(
        self, statements: Iterable[GeneratedStatement]
    ) -> list[Conflict]:
        """Detect conflicts between generated statements and stored facts.

        Only entities the text references (mentioned or linked) are
        compared. A failed fact fetch is logged and yields no conflicts.

        Args:
            statements: Statements about existing entities.

        Returns:
            Conflicts of the session after detection.
        """
        self._ensure_open()
        log = self._log_operation(
            "ingest_generated_facts", session_id=str(self.session_id)
        )
        statements = list(statements)
        referenced = self._referenced_entity_ids() & {s.entity_id for s in statements}
        if not referenced:
            return self.current_conflicts()

        try:
            stored = await asyncio.wait_for(
                self._store.list_facts(referenced),
                timeout=self._config.commit.persistence_timeout_seconds,
            )
        except Exception as exc:
            log.warning("fact_fetch_failed", reason=str(exc) or type(exc).__name__)
            return self.current_conflicts()

        names = {
            entity_id: entry.name
            for entity_id in referenced
            if (entry := self._index.entry(entity_id)) is not None
        }
        detected = self._detector.detect(statements, stored, referenced, names)
        for conflict in detected:
            previous = self._conflicts.get(conflict.conflict_id)
            if previous is not None:
                conflict = conflict.with_resolution(previous.resolution, previous.note)
            self._conflicts[conflict.conflict_id] = conflict
        log.info("conflicts_detected", conflicts_found=len(detected))
        return self.current_conflicts()

    def add_manual_discovery(self, text: str, kind: EntityKind | None = None) -> Discovery:
        """Insert a Discovery for text the reviewer selected.

        Selecting the name of a known entity links it instead.

        Args:
            text: Selected text.
            kind: Kind chosen by the reviewer; inferred when None.

        Returns:
            The Discovery as stored in the ledger.

        Raises:
            ScanError: If the selection contains no name.
        """
        self._ensure_open()
        name = clean_name(text)
        if not name:
            raise ScanError("selection contains no name")
        match = self._index.match(name)
        if match.is_exact and match.entry is not None:
            discovery = Discovery(
                key=normalize_name(name),
                name=name,
                suggested_kind=kind or match.entry.kind,
                context=MANUAL_SELECTION_CONTEXT,
                status=DiscoveryStatus.LINK_EXISTING,
                link_target_id=match.entry.entity_id,
                source=DiscoverySource.MANUAL_SELECTION,
            )
        else:
            discovery = Discovery(
                key=normalize_name(name),
                name=name,
                suggested_kind=kind or infer_kind(name),
                context=MANUAL_SELECTION_CONTEXT,
                status=DiscoveryStatus.CREATE_STUB,
                source=DiscoverySource.MANUAL_SELECTION,
            )
        self._apply([discovery], DiscoverySource.MANUAL_SELECTION)
        return self._ledger.get(discovery.key)

    def link_existing(self, entity_id: UUID) -> Discovery:
        """Insert a Discovery linking a known entity the reviewer picked.

        Raises:
            EntityNotFoundError: If the entity is not in the roster.
        """
        self._ensure_open()
        entry = self._index.entry(entity_id)
        if entry is None:
            raise EntityNotFoundError(entity_id)
        discovery = Discovery(
            key=normalize_name(entry.name) or str(entity_id),
            name=entry.name,
            suggested_kind=entry.kind,
            context=MANUAL_LINK_CONTEXT,
            status=DiscoveryStatus.LINK_EXISTING,
            link_target_id=entity_id,
            source=DiscoverySource.MANUAL_LINK,
        )
        self._apply([discovery], DiscoverySource.MANUAL_LINK)
        return self._ledger.get(discovery.key)

    # Review surface

    def current_discoveries(self) -> list[Discovery]:
        """Ledger contents in first-occurrence order."""
        return self._ledger.current()

    def current_conflicts(self) -> list[Conflict]:
        """Conflicts in detection order."""
        return list(self._conflicts.values())

    def existing_mentions(self) -> list[ExistingMention]:
        """Spans of ingested text naming known entities."""
        return list(self._mentions)

    def canon_score(self) -> CanonScore:
        """Rate how much the ingested text leans on existing lore."""
        inventions = [
            d
            for d in self._ledger.current()
            if d.source in (DiscoverySource.SCAN, DiscoverySource.STRUCTURED)
        ]
        existing = {mention.entity_id for mention in self._mentions}
        return CanonScore.from_counts(len(inventions), len(existing))

    def set_discovery_status(
        self,
        key: str,
        status: DiscoveryStatus,
        link_target: UUID | None = None,
    ) -> Discovery:
        """Record the reviewer's decision on a Discovery.

        Raises:
            DiscoveryNotFoundError: If no Discovery has this key.
            InvalidDiscoveryTransitionError: If the transition is illegal.
        """
        self._ensure_open()
        return self._ledger.set_status(key, status, link_target)

    def set_discovery_kind(self, key: str, kind: EntityKind) -> Discovery:
        """Reclassify a Discovery.

        Raises:
            DiscoveryNotFoundError: If no Discovery has this key.
        """
        self._ensure_open()
        return self._ledger.set_kind(key, kind)

    def set_conflict_resolution(
        self,
        conflict_id: str,
        resolution: ConflictResolution,
        note: str | None = None,
    ) -> Conflict:
        """Record the reviewer's decision on a Conflict.

        Raises:
            ConflictNotFoundError: If the conflict is not in this review.
            InvalidConflictResolutionError: If merged_note has no note.
        """
        self._ensure_open()
        conflict = self._conflicts.get(conflict_id)
        if conflict is None:
            raise ConflictNotFoundError(conflict_id)
        if resolution is ConflictResolution.MERGED_NOTE and not (note and note.strip()):
            raise InvalidConflictResolutionError(conflict_id, "merged_note requires a note")
        updated = conflict.with_resolution(
            resolution, note if resolution is ConflictResolution.MERGED_NOTE else None
        )
        self._conflicts[conflict_id] = updated
        return updated

    async def commit(self, draft: EntityDraft) -> CommitResult:
        """Commit the draft with the reviewed Discoveries and Conflicts.

        The session closes once the primary entity is saved; a failed
        anchor leaves it open so the reviewer can retry.

        Args:
            draft: The primary entity.

        Returns:
            CommitResult from the coordinator.
        """
        self._ensure_open()
        result = await self._coordinator.commit(
            self.campaign_id,
            draft,
            self._ledger.current(),
            self.current_conflicts(),
            self._index,
        )
        if not result.success:
            return result
        for key, outcome in result.outcomes.items():
            if key not in self._ledger or outcome.entity_id is None:
                continue
            if outcome.status is DiscoveryStatus.COMMITTED:
                self._ledger.mark_committed(key, outcome.entity_id)
            elif outcome.status.is_committable:
                # Entity exists but its edge failed; keep pointing at it
                self._ledger.set_status(key, DiscoveryStatus.LINK_EXISTING, outcome.entity_id)
        self._state = ReviewState.COMMITTED
        return result

    async def link_structural(
        self, result: CommitResult, links: Iterable[StructuralLink]
    ) -> list[Relationship]:
        """Add structurally implied edges after a successful commit."""
        return await self._coordinator.link_structural(self.campaign_id, result, links)

    def discard(self) -> None:
        """Drop everything gathered in this session; nothing is written."""
        self._ensure_open()
        self._ledger.clear()
        self._conflicts.clear()
        self._mentions.clear()
        self._state = ReviewState.DISCARDED
        self._log_operation("discard", session_id=str(self.session_id)).info(
            "review_discarded"
        )

    # Internals

    def _ensure_open(self) -> None:
        if self._state is not ReviewState.OPEN:
            raise ReviewSessionClosedError(self.session_id, self._state.value)

    def _annotate(self, discoveries: Iterable[Discovery]) -> list[Discovery]:
        """Attach advisory fuzzy-match suggestions."""
        annotated: list[Discovery] = []
        for discovery in discoveries:
            match = self._index.match(discovery.name)
            if match.kind is MatchKind.FUZZY and match.entity_id is not None:
                discovery = discovery.with_suggestion(match.entity_id, match.score)
            annotated.append(discovery)
        return annotated

    def _apply(self, discoveries: list[Discovery], source: DiscoverySource) -> None:
        self._ledger.apply(DiscoveryBatch(discoveries))
        if self._metrics is not None:
            self._metrics.record_ingested(source, len(discoveries))

    def _referenced_entity_ids(self) -> set[UUID]:
        referenced = {mention.entity_id for mention in self._mentions}
        referenced.update(
            d.link_target_id
            for d in self._ledger.current()
            if d.status is DiscoveryStatus.LINK_EXISTING and d.link_target_id is not None
        )
        return referenced


class ReviewSessionService(LoggingMixin):
    """Opens review sessions against a campaign roster.

    Example:
        >>> service = ReviewSessionService(store)
        >>> session = await service.open_session(campaign_id, authoring="The Gilded Hand")
        >>> session.ingest_narrative(text)
    """

    def __init__(
        self,
        store: LoreStoreProtocol,
        config: DiscoveryConfig | None = None,
        metrics: DiscoveryMetricsCollector | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Persistent store port.
            config: Scanner, match and commit configuration.
            metrics: Optional metrics collector.
        """
        self._store = store
        self._config = config or DiscoveryConfig()
        self._metrics = metrics
        self._coordinator = CommitCoordinatorService(store, self._config.commit, metrics)
        self._init_logger()

    async def open_session(
        self, campaign_id: UUID, authoring: str | None = None
    ) -> ReviewSession:
        """Open a review session for one authored entity.

        A failed roster fetch is logged as a warning and the session
        starts with an empty index.

        Args:
            campaign_id: Campaign being authored.
            authoring: Name of the entity being authored, if known.

        Returns:
            An open ReviewSession.
        """
        correlation_id = generate_correlation_id()
        set_correlation_id(correlation_id)
        log = self._log_operation("open_session", campaign_id=str(campaign_id))
        try:
            index = await self._load_index(campaign_id)
        except MatchIndexError as exc:
            log.warning("roster_fetch_failed", reason=exc.reason)
            index = MatchIndex.empty(self._config.match)

        log.info("review_session_opened", known_entities=len(index), authoring=authoring)
        return ReviewSession(
            campaign_id=campaign_id,
            authoring=authoring,
            index=index,
            store=self._store,
            coordinator=self._coordinator,
            config=self._config,
            correlation_id=correlation_id,
            metrics=self._metrics,
        )

    async def _load_index(self, campaign_id: UUID) -> MatchIndex:
        try:
            roster = await asyncio.wait_for(
                self._store.list_roster(campaign_id),
                timeout=self._config.commit.persistence_timeout_seconds,
            )
        except Exception as exc:
            raise MatchIndexError(campaign_id, str(exc) or type(exc).__name__) from exc
        return MatchIndex(roster, self._config.match)
