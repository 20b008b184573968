"""Commit result models.

A commit never raises for expected failures. Its outcome is reported as
a CommitResult: a success flag, everything that was written, the concrete
entity each committed Discovery produced, and per-item errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID

from loreforge.domain.errors.commit import CommitFatalError, CommitItemError
from loreforge.domain.models.discovery import DiscoveryStatus
from loreforge.domain.models.entity import Entity
from loreforge.domain.models.fact import Fact
from loreforge.domain.models.relationship import Relationship, RelationshipKind


class CommitOperation(Enum):
    """Independent write kinds performed after the primary entity."""

    CREATE_STUB = "create_stub"
    CREATE_RELATIONSHIP = "create_relationship"
    APPEND_FACT = "append_fact"


@dataclass(frozen=True)
class CommittedDiscovery:
    """What one committed Discovery produced.

    Attributes:
        key: Discovery identity key.
        entity_id: Entity the Discovery now refers to (new stub or
            existing entity).
        status: Final status (COMMITTED, or the status it was left in
            when one of its writes failed).
        created_stub: True if a new stub entity was inserted.
        relationship_id: Edge connecting it to the primary entity.
    """

    key: str
    entity_id: UUID | None
    status: DiscoveryStatus
    created_stub: bool = False
    relationship_id: UUID | None = None


@dataclass
class CommitResult:
    """Structured outcome of a commit.

    Attributes:
        success: True when the primary entity was saved.
        entity: The saved primary entity.
        created_stubs: Stub entities inserted by this commit.
        relationships: Edges inserted by this commit.
        facts: Facts appended by this commit.
        outcomes: Identity key to what the Discovery produced.
        errors: Per-item failures; the primary entity is unaffected.
        fatal_error: Set when the primary entity could not be saved.
    """

    success: bool
    entity: Entity | None = None
    created_stubs: list[Entity] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    facts: list[Fact] = field(default_factory=list)
    outcomes: dict[str, CommittedDiscovery] = field(default_factory=dict)
    errors: list[CommitItemError] = field(default_factory=list)
    fatal_error: CommitFatalError | None = None

    @classmethod
    def failed(cls, error: CommitFatalError) -> CommitResult:
        """Build the result of a commit whose anchor failed."""
        return cls(success=False, fatal_error=error)

    @property
    def entity_ids_by_key(self) -> dict[str, UUID]:
        """Identity key to concrete entity id for committed Discoveries."""
        return {
            key: outcome.entity_id
            for key, outcome in self.outcomes.items()
            if outcome.entity_id is not None
        }

    @property
    def is_partial(self) -> bool:
        """True when the entity saved but some items failed."""
        return self.success and bool(self.errors)

    def summary(self) -> str:
        """Human-readable outcome, e.g. "entity saved; 2 of 5 linked stubs failed"."""
        if not self.success:
            reason = self.fatal_error.reason if self.fatal_error else "unknown error"
            return f"entity not saved: {reason}"
        attempted = len(self.outcomes)
        failed_keys = {
            error.item_key for error in self.errors if error.item_key in self.outcomes
        }
        other_failures = len(
            [error for error in self.errors if error.item_key not in self.outcomes]
        )
        parts = ["entity saved"]
        if failed_keys:
            parts.append(f"{len(failed_keys)} of {attempted} linked stubs failed")
        elif attempted:
            parts.append(f"{attempted} linked")
        if other_failures:
            parts.append(f"{other_failures} other writes failed")
        return "; ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "success": self.success,
            "entity": self.entity.to_dict() if self.entity else None,
            "created_stubs": [stub.to_dict() for stub in self.created_stubs],
            "relationships": [rel.to_dict() for rel in self.relationships],
            "facts": [fact.to_dict() for fact in self.facts],
            "outcomes": {
                key: {
                    "entity_id": str(o.entity_id) if o.entity_id else None,
                    "status": o.status.value,
                    "created_stub": o.created_stub,
                    "relationship_id": (
                        str(o.relationship_id) if o.relationship_id else None
                    ),
                }
                for key, o in self.outcomes.items()
            },
            "errors": [error.to_dict() for error in self.errors],
            "fatal_error": self.fatal_error.to_dict() if self.fatal_error else None,
            "summary": self.summary(),
        }


@dataclass(frozen=True)
class StructuralLink:
    """An edge implied by structure between two committed Discoveries.

    Keys are resolved through CommitResult.entity_ids_by_key, e.g. a
    faction's key member who lives in one of its territories.

    Attributes:
        source_key: Identity key of the edge source.
        target_key: Identity key of the edge target.
        kind: Relationship kind.
        description: Optional edge description.
    """

    source_key: str
    target_key: str
    kind: RelationshipKind
    description: str | None = None
