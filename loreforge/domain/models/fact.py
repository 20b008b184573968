"""Fact domain models.

A Fact is an atomic statement attached to an entity. Facts are
append-only: superseding information is recorded as a new Fact that
points at the one it supersedes, preserving lore history.

Constraints:
- Facts are never mutated or deleted
- The current Fact for (entity, attribute) is the most recently created
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from loreforge.domain.models.entity import Visibility


class FactCategory(Enum):
    """Category of a Fact."""

    LORE = "lore"
    PLOT = "plot"
    MECHANICAL = "mechanical"
    SECRET = "secret"
    FLAVOR = "flavor"
    APPEARANCE = "appearance"
    PERSONALITY = "personality"
    BACKSTORY = "backstory"


class FactSource(Enum):
    """Where a Fact came from."""

    GENERATED = "generated"
    MANUAL = "manual"
    SESSION = "session"
    IMPORT = "import"
    CONFLICT_RESOLUTION = "conflict_resolution"


@dataclass(frozen=True)
class GeneratedStatement:
    """A statement the generator made about an entity.

    attribute is None for plain prose; otherwise it names what the
    statement asserts (e.g. "status", "owner", "appearance").
    """

    entity_id: UUID
    content: str
    attribute: str | None = None
    value: str | None = None
    category: FactCategory = FactCategory.LORE
    visibility: Visibility = Visibility.DM_ONLY

    @property
    def asserted_value(self) -> str:
        """The value being asserted, falling back to the content."""
        return self.value if self.value is not None else self.content


@dataclass(frozen=True)
class FactWrite:
    """Field values for a Fact append. The store assigns the id."""

    entity_id: UUID
    campaign_id: UUID
    content: str
    category: FactCategory = FactCategory.LORE
    visibility: Visibility = Visibility.DM_ONLY
    attribute: str | None = None
    value: str | None = None
    source: FactSource = FactSource.GENERATED
    supersedes_fact_id: UUID | None = None

    def to_fact(self, fact_id: UUID | None = None) -> Fact:
        """Materialize as a Fact with the given (or a fresh) id."""
        return Fact(
            fact_id=fact_id or uuid4(),
            entity_id=self.entity_id,
            campaign_id=self.campaign_id,
            content=self.content,
            category=self.category,
            visibility=self.visibility,
            attribute=self.attribute,
            value=self.value,
            source=self.source,
            supersedes_fact_id=self.supersedes_fact_id,
        )


@dataclass(frozen=True)
class Fact:
    """A stored, append-only statement about an entity."""

    fact_id: UUID
    entity_id: UUID
    campaign_id: UUID
    content: str
    category: FactCategory = FactCategory.LORE
    visibility: Visibility = Visibility.DM_ONLY
    attribute: str | None = None
    value: str | None = None
    source: FactSource = FactSource.GENERATED
    supersedes_fact_id: UUID | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def stated_value(self) -> str:
        """The recorded value, falling back to the content."""
        return self.value if self.value is not None else self.content

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "fact_id": str(self.fact_id),
            "entity_id": str(self.entity_id),
            "campaign_id": str(self.campaign_id),
            "content": self.content,
            "category": self.category.value,
            "visibility": self.visibility.value,
            "attribute": self.attribute,
            "value": self.value,
            "source": self.source.value,
            "supersedes_fact_id": (
                str(self.supersedes_fact_id) if self.supersedes_fact_id else None
            ),
            "created_at": self.created_at.isoformat(),
        }


def current_facts(facts: Iterable[Fact]) -> dict[tuple[UUID, str], Fact]:
    """Select the current Fact per (entity, attribute).

    Facts without an attribute are prose and are not keyed. Later
    created_at wins; on equal timestamps the later position in the
    input wins, matching append order.

    Args:
        facts: Stored facts in append order.

    Returns:
        Mapping of (entity_id, attribute) to the current Fact.
    """
    current: dict[tuple[UUID, str], Fact] = {}
    for fact in facts:
        if not fact.attribute:
            continue
        key = (fact.entity_id, fact.attribute.strip().lower())
        existing = current.get(key)
        if existing is None or fact.created_at >= existing.created_at:
            current[key] = fact
    return current
