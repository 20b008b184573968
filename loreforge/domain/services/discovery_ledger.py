"""Discovery ledger domain service.

The ledger is the single owner of the Discoveries of one review cycle.
Every producer (narrative scan, structured extraction, manual selection,
manual link) emits a DiscoveryBatch; the ledger folds the stream of
batches with one deterministic reducer instead of letting each producer
read-modify-write shared state.

Constraints:
- merge() is commutative on the resulting key -> Discovery mapping and
  idempotent: merge(merge(A, B), A) == merge(A, B)
- Merging is additive: Discoveries from structured extraction survive a
  later re-scan of the narrative text
- A kind set by the reviewer outranks every producer's guess
- Status changes follow the transition matrix of DiscoveryStatus
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import reduce
from uuid import UUID

from loreforge.domain.errors.discovery import (
    DiscoveryNotFoundError,
    InvalidDiscoveryTransitionError,
)
from loreforge.domain.models.discovery import Discovery, DiscoveryBatch, DiscoveryStatus
from loreforge.domain.models.entity import EntityKind


def merge(batch_a: DiscoveryBatch, batch_b: DiscoveryBatch) -> DiscoveryBatch:
    """Merge two batches, combining Discoveries that share a key.

    Args:
        batch_a: First batch.
        batch_b: Second batch.

    Returns:
        Batch in first-occurrence order (batch_a first).
    """
    return DiscoveryBatch([*batch_a, *batch_b])


def reduce_batches(batches: Iterable[DiscoveryBatch]) -> DiscoveryBatch:
    """Fold a stream of batches into one."""
    return reduce(merge, batches, DiscoveryBatch.empty())


class DiscoveryLedger:
    """Mutable, key-unique set of Discoveries for one review cycle.

    Owned by a single review session and never shared, so it takes no
    locks.

    Example:
        >>> ledger = DiscoveryLedger()
        >>> ledger.apply(DiscoveryBatch([scanned]))
        >>> ledger.set_status(scanned.key, DiscoveryStatus.CREATE_STUB)
        >>> [d.key for d in ledger.committable()]
        ['captain vale']
    """

    def __init__(self, discoveries: Iterable[Discovery] = ()) -> None:
        self._batch = DiscoveryBatch(discoveries)

    def __len__(self) -> int:
        return len(self._batch)

    def __contains__(self, key: object) -> bool:
        return key in self._batch

    def apply(self, batch: DiscoveryBatch) -> DiscoveryBatch:
        """Fold a batch into the ledger.

        Args:
            batch: Discoveries from one producer.

        Returns:
            Snapshot of the ledger after the merge.
        """
        self._batch = merge(self._batch, batch)
        return self._batch

    def snapshot(self) -> DiscoveryBatch:
        """Current ledger contents as an immutable batch."""
        return self._batch

    def current(self) -> list[Discovery]:
        """All Discoveries in first-occurrence order."""
        return list(self._batch)

    def committable(self) -> list[Discovery]:
        """Discoveries a commit acts on (CREATE_STUB and LINK_EXISTING)."""
        return [d for d in self._batch if d.status.is_committable]

    def get(self, key: str) -> Discovery:
        """Look up a Discovery.

        Raises:
            DiscoveryNotFoundError: If no Discovery has this key.
        """
        discovery = self._batch.get(key)
        if discovery is None:
            raise DiscoveryNotFoundError(key)
        return discovery

    def set_status(
        self,
        key: str,
        status: DiscoveryStatus,
        link_target_id: UUID | None = None,
    ) -> Discovery:
        """Move a Discovery to a new status.

        Setting the status a Discovery already has (with the same link
        target) is a no-op.

        Args:
            key: Identity key.
            status: Requested status.
            link_target_id: Entity to link; required for LINK_EXISTING.

        Returns:
            The updated Discovery.

        Raises:
            DiscoveryNotFoundError: If no Discovery has this key.
            InvalidDiscoveryTransitionError: If the transition is not
                allowed or LINK_EXISTING has no link target.
        """
        discovery = self.get(key)
        if status is discovery.status and link_target_id == discovery.link_target_id:
            return discovery
        if not discovery.status.can_transition_to(status):
            raise InvalidDiscoveryTransitionError(key, discovery.status, status)
        if status is DiscoveryStatus.LINK_EXISTING and link_target_id is None:
            raise InvalidDiscoveryTransitionError(
                key, discovery.status, status, reason="a link target is required"
            )
        if status is DiscoveryStatus.COMMITTED and link_target_id is None:
            link_target_id = discovery.link_target_id
        updated = discovery.with_status(status, link_target_id)
        self._replace(updated)
        return updated

    def set_kind(self, key: str, kind: EntityKind) -> Discovery:
        """Reclassify a Discovery.

        Raises:
            DiscoveryNotFoundError: If no Discovery has this key.
        """
        updated = self.get(key).with_kind(kind)
        self._replace(updated)
        return updated

    def mark_committed(self, key: str, entity_id: UUID) -> Discovery:
        """Record that a commit produced or linked entity_id for key."""
        return self.set_status(key, DiscoveryStatus.COMMITTED, entity_id)

    def clear(self) -> None:
        """Drop every Discovery."""
        self._batch = DiscoveryBatch.empty()

    def _replace(self, discovery: Discovery) -> None:
        items = self._batch.as_dict()
        items[discovery.key] = discovery
        self._batch = DiscoveryBatch(items.values())
