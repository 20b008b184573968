"""Conflict domain models.

A Conflict is an ephemeral candidate contradiction between a newly
generated statement and a Fact already stored about the same attribute
of an existing entity. Resolution is a recorded human decision; nothing
is merged automatically.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any
from uuid import UUID


class ConflictResolution(Enum):
    """Human decision on a Conflict."""

    UNRESOLVED = "unresolved"
    KEEP_OLD = "keep_old"
    TAKE_NEW = "take_new"
    MERGED_NOTE = "merged_note"


class ConflictKind(Enum):
    """How the contradiction was detected.

    STRUCTURED: values of a comparable attribute differ.
    FREE_TEXT: prose about a named attribute differs; human judgement only.
    """

    STRUCTURED = "structured"
    FREE_TEXT = "free_text"


@dataclass(frozen=True)
class Conflict:
    """A candidate contradiction awaiting a human decision.

    Attributes:
        conflict_id: Deterministic id "<entity_id>:<attribute>".
        entity_id: Existing entity the statements are about.
        entity_name: Display name of that entity, if known.
        attribute: Attribute both statements assert.
        new_text: What the generator now says.
        old_text: What the stored Fact says.
        existing_fact_id: Stored Fact being contradicted.
        kind: Structured or free-text contradiction.
        resolution: Reviewer decision.
        note: Reviewer text for MERGED_NOTE.
    """

    conflict_id: str
    entity_id: UUID
    attribute: str
    new_text: str
    old_text: str
    existing_fact_id: UUID
    kind: ConflictKind = ConflictKind.STRUCTURED
    entity_name: str | None = None
    resolution: ConflictResolution = ConflictResolution.UNRESOLVED
    note: str | None = None

    @staticmethod
    def make_id(entity_id: UUID, attribute: str) -> str:
        """Build the deterministic conflict id."""
        return f"{entity_id}:{attribute.strip().lower()}"

    @property
    def is_resolved(self) -> bool:
        """True once a reviewer has decided."""
        return self.resolution is not ConflictResolution.UNRESOLVED

    def with_resolution(
        self, resolution: ConflictResolution, note: str | None = None
    ) -> Conflict:
        """Return a copy with the reviewer decision recorded."""
        return replace(self, resolution=resolution, note=note)

    def kept_value(self) -> str | None:
        """Value a resolved conflict asks to record, None if unresolved."""
        if self.resolution is ConflictResolution.KEEP_OLD:
            return self.old_text
        if self.resolution is ConflictResolution.TAKE_NEW:
            return self.new_text
        if self.resolution is ConflictResolution.MERGED_NOTE:
            return self.note
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the review surface."""
        return {
            "conflict_id": self.conflict_id,
            "entity_id": str(self.entity_id),
            "entity_name": self.entity_name,
            "attribute": self.attribute,
            "new_text": self.new_text,
            "old_text": self.old_text,
            "existing_fact_id": str(self.existing_fact_id),
            "kind": self.kind.value,
            "resolution": self.resolution.value,
            "note": self.note,
        }
