"""Unit tests for the Discovery ledger and merge semantics.

Tests that folding producer batches is order-independent and idempotent
and that reviewer decisions follow the status transition matrix.
"""

from uuid import uuid4

import pytest

from loreforge.domain.errors.discovery import (
    DiscoveryNotFoundError,
    InvalidDiscoveryTransitionError,
)
from loreforge.domain.models.discovery import (
    Discovery,
    DiscoveryBatch,
    DiscoverySource,
    DiscoveryStatus,
)
from loreforge.domain.models.entity import EntityKind
from loreforge.domain.services.discovery_ledger import (
    DiscoveryLedger,
    merge,
    reduce_batches,
)


def _scanned(name: str, kind: EntityKind = EntityKind.UNCLASSIFIED) -> Discovery:
    return Discovery(
        key=name.casefold(),
        name=name,
        suggested_kind=kind,
        context=f"... {name} ...",
        source=DiscoverySource.SCAN,
    )


@pytest.fixture
def vale_scan() -> Discovery:
    return _scanned("Captain Vale", EntityKind.NPC)


@pytest.fixture
def vale_structured() -> Discovery:
    return Discovery(
        key="captain vale",
        name="Captain Vale",
        suggested_kind=EntityKind.NPC,
        context="Key member of The Gilded Hand",
        source=DiscoverySource.STRUCTURED,
        origin_field="key_members",
    )


class TestMerge:
    """Tests for merge() and reduce_batches()."""

    def test_merge_is_commutative(
        self, vale_scan: Discovery, vale_structured: Discovery
    ) -> None:
        """Order of batches does not change the resulting mapping."""
        a = DiscoveryBatch([vale_scan, _scanned("Stormwatch Keep")])
        b = DiscoveryBatch([vale_structured])

        assert merge(a, b) == merge(b, a)

    def test_merge_is_idempotent(
        self, vale_scan: Discovery, vale_structured: Discovery
    ) -> None:
        """Re-applying a batch changes nothing."""
        a = DiscoveryBatch([vale_scan])
        b = DiscoveryBatch([vale_structured])
        merged = merge(a, b)

        assert merge(merged, a) == merged
        assert merge(merged, merged) == merged

    def test_scan_and_structured_collapse_to_one(
        self, vale_scan: Discovery, vale_structured: Discovery
    ) -> None:
        """The same name from two producers is one Discovery."""
        merged = merge(DiscoveryBatch([vale_scan]), DiscoveryBatch([vale_structured]))

        assert len(merged) == 1
        discovery = merged.get("captain vale")
        assert discovery is not None
        assert discovery.source is DiscoverySource.STRUCTURED
        assert discovery.origin_field == "key_members"

    def test_structured_discoveries_survive_rescan(
        self, vale_structured: Discovery
    ) -> None:
        """A later scan never drops structured Discoveries."""
        merged = reduce_batches(
            [
                DiscoveryBatch([vale_structured]),
                DiscoveryBatch([_scanned("Stormwatch Keep")]),
            ]
        )

        assert set(merged.keys()) == {"captain vale", "stormwatch keep"}

    def test_decision_is_never_lost(self, vale_scan: Discovery) -> None:
        """A decided Discovery does not fall back to pending."""
        decided = vale_scan.with_status(DiscoveryStatus.CREATE_STUB)

        merged = merge(DiscoveryBatch([decided]), DiscoveryBatch([vale_scan]))

        assert merged.get("captain vale").status is DiscoveryStatus.CREATE_STUB

    def test_merging_different_keys_raises(self, vale_scan: Discovery) -> None:
        """Only Discoveries with one key can be merged."""
        with pytest.raises(ValueError):
            vale_scan.merged_with(_scanned("Stormwatch Keep"))


class TestLedgerStatus:
    """Tests for DiscoveryLedger.set_status()."""

    def test_create_stub_then_commit(self, vale_scan: Discovery) -> None:
        """The happy path follows the transition matrix."""
        ledger = DiscoveryLedger([vale_scan])
        entity_id = uuid4()

        ledger.set_status("captain vale", DiscoveryStatus.CREATE_STUB)
        committed = ledger.mark_committed("captain vale", entity_id)

        assert committed.status is DiscoveryStatus.COMMITTED
        assert committed.link_target_id == entity_id
        assert ledger.committable() == []

    def test_link_existing_requires_target(self, vale_scan: Discovery) -> None:
        """Linking without a target is rejected."""
        ledger = DiscoveryLedger([vale_scan])

        with pytest.raises(InvalidDiscoveryTransitionError):
            ledger.set_status("captain vale", DiscoveryStatus.LINK_EXISTING)

    def test_ignore_is_terminal(self, vale_scan: Discovery) -> None:
        """An ignored Discovery cannot be revived."""
        ledger = DiscoveryLedger([vale_scan])
        ledger.set_status("captain vale", DiscoveryStatus.IGNORE)

        with pytest.raises(InvalidDiscoveryTransitionError):
            ledger.set_status("captain vale", DiscoveryStatus.CREATE_STUB)

    def test_same_status_is_a_no_op(self, vale_scan: Discovery) -> None:
        """Repeating a decision is accepted and changes nothing."""
        ledger = DiscoveryLedger([vale_scan])
        first = ledger.set_status("captain vale", DiscoveryStatus.CREATE_STUB)

        second = ledger.set_status("captain vale", DiscoveryStatus.CREATE_STUB)

        assert second == first

    def test_unknown_key(self) -> None:
        """Decisions on unknown keys are rejected."""
        with pytest.raises(DiscoveryNotFoundError):
            DiscoveryLedger().set_status("nobody", DiscoveryStatus.IGNORE)

    def test_committable_only_lists_decided_items(self, vale_scan: Discovery) -> None:
        """Pending and ignored Discoveries are not committed."""
        keep = _scanned("Stormwatch Keep")
        skip = _scanned("Brannoc Stoneheart")
        ledger = DiscoveryLedger([vale_scan, keep, skip])
        ledger.set_status("stormwatch keep", DiscoveryStatus.CREATE_STUB)
        ledger.set_status("brannoc stoneheart", DiscoveryStatus.IGNORE)

        assert [d.key for d in ledger.committable()] == ["stormwatch keep"]


class TestLedgerApply:
    """Tests for DiscoveryLedger.apply() and friends."""

    def test_rescan_keeps_reviewer_decisions(self, vale_scan: Discovery) -> None:
        """Applying a fresh scan does not reset decisions."""
        ledger = DiscoveryLedger([vale_scan])
        ledger.set_status("captain vale", DiscoveryStatus.CREATE_STUB)

        ledger.apply(DiscoveryBatch([vale_scan]))

        assert ledger.get("captain vale").status is DiscoveryStatus.CREATE_STUB
        assert len(ledger) == 1

    def test_set_kind(self, vale_scan: Discovery) -> None:
        """Reclassification replaces the suggested kind."""
        ledger = DiscoveryLedger([vale_scan])

        updated = ledger.set_kind("captain vale", EntityKind.FACTION)

        assert updated.suggested_kind is EntityKind.FACTION
        assert ledger.get("captain vale").suggested_kind is EntityKind.FACTION

    def test_rescan_keeps_reviewer_kind(self) -> None:
        """A reclassified kind survives a rescan that guesses otherwise."""
        guessed = _scanned("Mira Voss", EntityKind.LOCATION)
        ledger = DiscoveryLedger([guessed])
        ledger.set_kind("mira voss", EntityKind.NPC)

        ledger.apply(DiscoveryBatch([guessed]))

        kept = ledger.get("mira voss")
        assert kept.suggested_kind is EntityKind.NPC
        assert kept.kind_locked

    def test_reviewer_kind_beats_structured_kind(self) -> None:
        """Source precedence does not override a reviewer's kind."""
        ledger = DiscoveryLedger([_scanned("Gloomfang")])
        ledger.set_kind("gloomfang", EntityKind.NPC)
        structured = Discovery(
            key="gloomfang",
            name="Gloomfang",
            suggested_kind=EntityKind.CREATURE,
            source=DiscoverySource.STRUCTURED,
            origin_field="creatures",
        )

        ledger.apply(DiscoveryBatch([structured]))

        assert ledger.get("gloomfang").suggested_kind is EntityKind.NPC

    def test_clear(self, vale_scan: Discovery) -> None:
        """clear() drops everything."""
        ledger = DiscoveryLedger([vale_scan])

        ledger.clear()

        assert ledger.current() == []
        assert "captain vale" not in ledger
