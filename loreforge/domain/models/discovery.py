"""Discovery domain models.

A Discovery is an ephemeral candidate reference to a new entity found in
generated output. It lives for one generation-review-commit cycle and is
never persisted on its own.

Constraints:
- Identity is the normalized name key; a ledger never holds two
  Discoveries with the same key
- Status is a closed enumeration with an explicit transition matrix
- Merging two Discoveries with the same key is commutative, associative
  and idempotent, and never loses a decision already made

State Machine:
    PENDING -> CREATE_STUB | LINK_EXISTING | IGNORE
    CREATE_STUB -> LINK_EXISTING (duplicate found during commit)
    CREATE_STUB -> COMMITTED
    LINK_EXISTING -> COMMITTED
    IGNORE, COMMITTED are terminal
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any
from uuid import UUID

from loreforge.domain.models.entity import EntityKind


class DiscoveryStatus(Enum):
    """Review status of a Discovery."""

    PENDING = "pending"
    CREATE_STUB = "create_stub"
    LINK_EXISTING = "link_existing"
    IGNORE = "ignore"
    COMMITTED = "committed"

    def valid_transitions(self) -> frozenset[DiscoveryStatus]:
        """Get valid transitions from this status.

        Returns:
            Frozenset of statuses this status can move to.
        """
        return DISCOVERY_TRANSITIONS.get(self, frozenset())

    def can_transition_to(self, target: DiscoveryStatus) -> bool:
        """Check whether moving to target is allowed."""
        return target in self.valid_transitions()

    def is_terminal(self) -> bool:
        """True for statuses with no outgoing transitions."""
        return not self.valid_transitions()

    @property
    def decision_rank(self) -> int:
        """Rank used when two sources disagree on a merged Discovery."""
        return _DECISION_RANK[self]

    @property
    def is_committable(self) -> bool:
        """True for statuses a commit acts on."""
        return self in (DiscoveryStatus.CREATE_STUB, DiscoveryStatus.LINK_EXISTING)


DISCOVERY_TRANSITIONS: dict[DiscoveryStatus, frozenset[DiscoveryStatus]] = {
    DiscoveryStatus.PENDING: frozenset(
        {
            DiscoveryStatus.CREATE_STUB,
            DiscoveryStatus.LINK_EXISTING,
            DiscoveryStatus.IGNORE,
        }
    ),
    DiscoveryStatus.CREATE_STUB: frozenset(
        {DiscoveryStatus.LINK_EXISTING, DiscoveryStatus.COMMITTED}
    ),
    DiscoveryStatus.LINK_EXISTING: frozenset({DiscoveryStatus.COMMITTED}),
    DiscoveryStatus.IGNORE: frozenset(),
    DiscoveryStatus.COMMITTED: frozenset(),
}

# Higher rank wins a merge: a decided Discovery never falls back to pending
_DECISION_RANK: dict[DiscoveryStatus, int] = {
    DiscoveryStatus.PENDING: 0,
    DiscoveryStatus.IGNORE: 1,
    DiscoveryStatus.CREATE_STUB: 2,
    DiscoveryStatus.LINK_EXISTING: 3,
    DiscoveryStatus.COMMITTED: 4,
}


class DiscoverySource(Enum):
    """Where a Discovery came from."""

    SCAN = "scan"
    STRUCTURED = "structured"
    MANUAL_SELECTION = "manual_selection"
    MANUAL_LINK = "manual_link"

    @property
    def precedence(self) -> int:
        """Higher precedence supplies name, kind and origin on merge."""
        return _SOURCE_PRECEDENCE[self]


_SOURCE_PRECEDENCE: dict[DiscoverySource, int] = {
    DiscoverySource.SCAN: 0,
    DiscoverySource.STRUCTURED: 1,
    DiscoverySource.MANUAL_SELECTION: 2,
    DiscoverySource.MANUAL_LINK: 3,
}


@dataclass(frozen=True)
class Discovery:
    """A candidate new-entity mention pending human review.

    Attributes:
        key: Identity key (normalized, case-folded name).
        name: Display name as it should be stored.
        suggested_kind: Kind inferred from context or fixed by the source.
        context: Surrounding text that motivated the Discovery.
        status: Review status.
        link_target_id: Entity to link to (LINK_EXISTING) or the entity
            the Discovery produced (COMMITTED).
        source: Provenance of the Discovery.
        origin_field: Structured field it was extracted from, if any.
        suggested_entity_id: Advisory fuzzy-match candidate.
        confidence: Advisory fuzzy-match score in [0, 1].
        kind_locked: True once a reviewer set the kind; merges keep it.
    """

    key: str
    name: str
    suggested_kind: EntityKind = EntityKind.UNCLASSIFIED
    context: str = ""
    status: DiscoveryStatus = DiscoveryStatus.PENDING
    link_target_id: UUID | None = None
    source: DiscoverySource = DiscoverySource.SCAN
    origin_field: str | None = None
    suggested_entity_id: UUID | None = None
    confidence: float = 0.0
    kind_locked: bool = False

    def with_status(
        self, status: DiscoveryStatus, link_target_id: UUID | None = None
    ) -> Discovery:
        """Return a copy with a new status and link target.

        Transition legality is enforced by the ledger, not here.
        """
        return replace(self, status=status, link_target_id=link_target_id)

    def with_kind(self, kind: EntityKind) -> Discovery:
        """Return a copy reclassified by the reviewer."""
        return replace(self, suggested_kind=kind, kind_locked=True)

    def with_suggestion(self, entity_id: UUID, confidence: float) -> Discovery:
        """Return a copy carrying an advisory fuzzy-match suggestion."""
        return replace(self, suggested_entity_id=entity_id, confidence=confidence)

    def merged_with(self, other: Discovery) -> Discovery:
        """Combine two Discoveries that share an identity key.

        Every field is picked by a total order over both inputs, so the
        result does not depend on argument order and merging a Discovery
        with itself returns it unchanged.

        Args:
            other: Discovery with the same key.

        Returns:
            The merged Discovery.

        Raises:
            ValueError: If the keys differ.
        """
        if other.key != self.key:
            raise ValueError(
                f"Cannot merge discoveries with different keys: "
                f"'{self.key}' and '{other.key}'"
            )
        pair = (self, other)

        decided = max(pair, key=lambda d: d.status.decision_rank)
        status = decided.status
        targets = sorted(
            str(d.link_target_id)
            for d in pair
            if d.status is status and d.link_target_id is not None
        )
        link_target_id = UUID(targets[0]) if targets else None

        named = min(pair, key=lambda d: (-d.source.precedence, d.name))
        kinded = min(
            pair,
            key=lambda d: (
                not d.kind_locked,
                d.suggested_kind is EntityKind.UNCLASSIFIED,
                -d.source.precedence,
                d.suggested_kind.value,
            ),
        )
        context = max((d.context for d in pair), key=lambda c: (len(c), c))
        origins = [d for d in pair if d.origin_field]
        origin_field = (
            min(origins, key=lambda d: (-d.source.precedence, d.origin_field or "")).origin_field
            if origins
            else None
        )
        suggested = max(
            pair, key=lambda d: (d.confidence, str(d.suggested_entity_id or ""))
        )

        return Discovery(
            key=self.key,
            name=named.name,
            suggested_kind=kinded.suggested_kind,
            context=context,
            status=status,
            link_target_id=link_target_id,
            source=max(pair, key=lambda d: d.source.precedence).source,
            origin_field=origin_field,
            suggested_entity_id=suggested.suggested_entity_id,
            confidence=suggested.confidence,
            kind_locked=kinded.kind_locked,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the review surface."""
        return {
            "key": self.key,
            "name": self.name,
            "suggested_kind": self.suggested_kind.value,
            "context": self.context,
            "status": self.status.value,
            "link_target_id": str(self.link_target_id) if self.link_target_id else None,
            "source": self.source.value,
            "origin_field": self.origin_field,
            "suggested_entity_id": (
                str(self.suggested_entity_id) if self.suggested_entity_id else None
            ),
            "confidence": self.confidence,
            "kind_locked": self.kind_locked,
        }


class DiscoveryBatch:
    """An ordered, key-unique collection of Discoveries.

    Equality compares the key to Discovery mapping and ignores order, so
    two batches holding the same Discoveries are equal however they were
    assembled. Iteration follows first-occurrence order.
    """

    __slots__ = ("_items",)

    def __init__(self, discoveries: Iterable[Discovery] = ()) -> None:
        items: dict[str, Discovery] = {}
        for discovery in discoveries:
            existing = items.get(discovery.key)
            items[discovery.key] = (
                discovery if existing is None else existing.merged_with(discovery)
            )
        self._items = items

    @classmethod
    def empty(cls) -> DiscoveryBatch:
        """Create an empty batch."""
        return cls()

    def __iter__(self) -> Iterator[Discovery]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscoveryBatch):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"DiscoveryBatch({list(self._items)!r})"

    def get(self, key: str) -> Discovery | None:
        """Look up a Discovery by identity key."""
        return self._items.get(key)

    def keys(self) -> list[str]:
        """Identity keys in first-occurrence order."""
        return list(self._items)

    def as_dict(self) -> dict[str, Discovery]:
        """Copy of the key to Discovery mapping."""
        return dict(self._items)
