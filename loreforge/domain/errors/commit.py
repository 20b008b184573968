"""Commit domain errors.

Commit failures are returned inside a CommitResult, never raised to the
caller: CommitItemError instances are collected per item and a
CommitFatalError marks a commit whose primary entity could not be saved.
"""

from __future__ import annotations

from typing import Any

from loreforge.domain.exceptions import LoreForgeError


class CommitError(LoreForgeError):
    """Base error for commit operations."""

    pass


class CommitItemError(CommitError):
    """One fact, stub or relationship write failed.

    The primary entity and the other items are unaffected.

    Attributes:
        item_key: Discovery identity key or conflict id of the item.
        operation: Which write failed (create_stub, create_relationship,
            append_fact).
        reason: Failure description.
        timed_out: True when the write exceeded its timeout.
    """

    def __init__(
        self,
        item_key: str,
        operation: str,
        reason: str,
        timed_out: bool = False,
    ) -> None:
        self.item_key = item_key
        self.operation = operation
        self.reason = reason
        self.timed_out = timed_out
        super().__init__(f"{operation} failed for '{item_key}': {reason}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for partial-outcome reporting."""
        return {
            "item_key": self.item_key,
            "operation": self.operation,
            "reason": self.reason,
            "timed_out": self.timed_out,
        }


class CommitFatalError(CommitError):
    """The primary entity write failed; nothing else was attempted.

    Attributes:
        entity_name: Name of the draft that failed to save.
        reason: Failure description.
    """

    def __init__(self, entity_name: str, reason: str) -> None:
        self.entity_name = entity_name
        self.reason = reason
        super().__init__(f"Failed to save '{entity_name}': {reason}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for error reporting."""
        return {"entity_name": self.entity_name, "reason": self.reason}
