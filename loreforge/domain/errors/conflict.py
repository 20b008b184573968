"""Conflict domain errors."""

from __future__ import annotations

from loreforge.domain.exceptions import LoreForgeError


class ConflictError(LoreForgeError):
    """Base error for conflict operations."""

    pass


class ConflictNotFoundError(ConflictError):
    """Raised when a conflict id is not part of the current review."""

    def __init__(self, conflict_id: str) -> None:
        self.conflict_id = conflict_id
        super().__init__(f"No conflict '{conflict_id}' in this review")


class InvalidConflictResolutionError(ConflictError):
    """Raised when a resolution is missing data it needs.

    A merged_note resolution must carry the reviewer's note.
    """

    def __init__(self, conflict_id: str, reason: str) -> None:
        self.conflict_id = conflict_id
        self.reason = reason
        super().__init__(f"Invalid resolution for conflict '{conflict_id}': {reason}")
