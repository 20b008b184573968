"""Application services for Lore Forge.

- ReviewSessionService: opens generation-review-commit cycles
- CommitCoordinatorService: persists a reviewed draft and its Discoveries
"""

from loreforge.application.services.commit_coordinator_service import (
    CommitCoordinatorService,
)
from loreforge.application.services.review_session_service import (
    ReviewSession,
    ReviewSessionService,
)

__all__ = [
    "CommitCoordinatorService",
    "ReviewSession",
    "ReviewSessionService",
]
