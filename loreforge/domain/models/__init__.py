"""Domain models for Lore Forge.

Contains value objects and domain models that represent core lore
concepts. These models are immutable and contain no infrastructure
dependencies.
"""

from loreforge.domain.models.commit import (
    CommitOperation,
    CommitResult,
    CommittedDiscovery,
    StructuralLink,
)
from loreforge.domain.models.conflict import (
    Conflict,
    ConflictKind,
    ConflictResolution,
)
from loreforge.domain.models.discovery import (
    Discovery,
    DiscoveryBatch,
    DiscoverySource,
    DiscoveryStatus,
)
from loreforge.domain.models.draft import AnchorLink, DraftStatement, EntityDraft
from loreforge.domain.models.entity import (
    Entity,
    EntityKind,
    EntityWrite,
    HistoryEntry,
    LifecycleStatus,
    RosterEntry,
    Visibility,
)
from loreforge.domain.models.fact import (
    Fact,
    FactCategory,
    FactSource,
    FactWrite,
    GeneratedStatement,
)
from loreforge.domain.models.relationship import (
    Relationship,
    RelationshipKind,
    RelationshipWrite,
)
from loreforge.domain.models.review import CanonScore, ExistingMention, ReviewState

__all__: list[str] = [
    "AnchorLink",
    "CanonScore",
    "CommitOperation",
    "CommitResult",
    "CommittedDiscovery",
    "Conflict",
    "ConflictKind",
    "ConflictResolution",
    "Discovery",
    "DiscoveryBatch",
    "DiscoverySource",
    "DiscoveryStatus",
    "DraftStatement",
    "Entity",
    "EntityDraft",
    "EntityKind",
    "EntityWrite",
    "ExistingMention",
    "Fact",
    "FactCategory",
    "FactSource",
    "FactWrite",
    "GeneratedStatement",
    "HistoryEntry",
    "LifecycleStatus",
    "Relationship",
    "RelationshipKind",
    "RelationshipWrite",
    "ReviewState",
    "RosterEntry",
    "StructuralLink",
    "Visibility",
]
