"""Discovery and scanning domain errors.

Scan and match failures never abort a review: the review session catches
ScanError and MatchIndexError, logs them as warnings and degrades to an
empty result so the user always has something to review.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loreforge.domain.exceptions import LoreForgeError

if TYPE_CHECKING:
    from loreforge.domain.models.discovery import DiscoveryStatus


class DiscoveryError(LoreForgeError):
    """Base error for discovery operations."""

    pass


class ScanError(DiscoveryError):
    """Raised when scanner input is malformed.

    Attributes:
        reason: Why the input could not be scanned.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot scan generated text: {reason}")


class MatchIndexError(DiscoveryError):
    """Raised when the known-entity roster could not be fetched.

    Treated as "no known entities": duplicate stubs become possible, so
    the failure is logged as a warning.

    Attributes:
        campaign_id: Campaign whose roster failed to load.
        reason: Underlying failure description.
    """

    def __init__(self, campaign_id: object, reason: str) -> None:
        self.campaign_id = campaign_id
        self.reason = reason
        super().__init__(f"Roster fetch failed for campaign {campaign_id}: {reason}")


class DiscoveryNotFoundError(DiscoveryError):
    """Raised when a discovery key is not in the ledger."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No discovery with identity '{key}' in this review")


class InvalidDiscoveryTransitionError(DiscoveryError):
    """Raised when a status change is not in the transition matrix.

    Attributes:
        key: Identity key of the discovery.
        current: Status the discovery is in.
        requested: Status that was requested.
    """

    def __init__(
        self,
        key: str,
        current: DiscoveryStatus,
        requested: DiscoveryStatus,
        reason: str | None = None,
    ) -> None:
        self.key = key
        self.current = current
        self.requested = requested
        message = (
            f"Discovery '{key}' cannot move from {current.value} to {requested.value}"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for review-surface error reporting."""
        return {
            "type": "invalid_discovery_transition",
            "key": self.key,
            "current": self.current.value,
            "requested": self.requested.value,
            "message": str(self),
        }
