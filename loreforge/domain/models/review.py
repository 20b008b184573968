"""Review session models.

State Machine:
    OPEN -> COMMITTED (primary entity saved)
    OPEN -> DISCARDED
    COMMITTED, DISCARDED are terminal
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID

from loreforge.domain.models.entity import EntityKind


class ReviewState(Enum):
    """Lifecycle of a review session."""

    OPEN = "open"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class CanonScore(Enum):
    """How strongly generated text leans on existing lore."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_counts(cls, discovery_count: int, existing_mention_count: int) -> CanonScore:
        """Rate text by new inventions versus references to known entities.

        Text that names nothing at all is fully canon.

        Args:
            discovery_count: Discoveries (new inventions) in the text.
            existing_mention_count: Distinct known entities mentioned.

        Returns:
            HIGH, MEDIUM or LOW.
        """
        total = discovery_count + existing_mention_count
        if total == 0:
            return cls.HIGH
        existing_ratio = existing_mention_count / total
        if existing_ratio >= 0.7 and discovery_count <= 2:
            return cls.HIGH
        if existing_ratio >= 0.4 or discovery_count <= 4:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class ExistingMention:
    """A span of generated text naming a known entity.

    Attributes:
        entity_id: Known entity.
        name: Its stored name.
        kind: Its kind.
        start: Offset of the span in the scanned text.
        end: Offset one past the span.
    """

    entity_id: UUID
    name: str
    kind: EntityKind
    start: int
    end: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the review surface."""
        return {
            "entity_id": str(self.entity_id),
            "name": self.name,
            "kind": self.kind.value,
            "start": self.start,
            "end": self.end,
        }
