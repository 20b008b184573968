"""Domain errors for Lore Forge.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from LoreForgeError.
"""

from loreforge.domain.errors.commit import (
    CommitError,
    CommitFatalError,
    CommitItemError,
)
from loreforge.domain.errors.conflict import (
    ConflictError,
    ConflictNotFoundError,
    InvalidConflictResolutionError,
)
from loreforge.domain.errors.discovery import (
    DiscoveryError,
    DiscoveryNotFoundError,
    InvalidDiscoveryTransitionError,
    MatchIndexError,
    ScanError,
)
from loreforge.domain.errors.review import ReviewSessionClosedError
from loreforge.domain.errors.store import (
    EntityNotFoundError,
    RelationshipNotFoundError,
    StoreError,
)

__all__: list[str] = [
    "CommitError",
    "CommitFatalError",
    "CommitItemError",
    "ConflictError",
    "ConflictNotFoundError",
    "DiscoveryError",
    "DiscoveryNotFoundError",
    "EntityNotFoundError",
    "InvalidConflictResolutionError",
    "InvalidDiscoveryTransitionError",
    "MatchIndexError",
    "RelationshipNotFoundError",
    "ReviewSessionClosedError",
    "ScanError",
    "StoreError",
]
