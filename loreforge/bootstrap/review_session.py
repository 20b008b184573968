"""Bootstrap wiring for review session dependencies."""

from __future__ import annotations

from loreforge.application.ports.lore_store import LoreStoreProtocol
from loreforge.application.services.review_session_service import ReviewSessionService
from loreforge.config.discovery_config import DEFAULT_DISCOVERY_CONFIG, DiscoveryConfig
from loreforge.infrastructure.monitoring.discovery_metrics import (
    get_discovery_metrics_collector,
)
from loreforge.infrastructure.stubs.lore_store_stub import LoreStoreStub

_lore_store: LoreStoreProtocol | None = None
_review_session_service: ReviewSessionService | None = None


def get_lore_store() -> LoreStoreProtocol:
    """Get lore store instance."""
    global _lore_store
    if _lore_store is None:
        _lore_store = LoreStoreStub()
    return _lore_store


def get_review_session_service(
    config: DiscoveryConfig | None = None,
) -> ReviewSessionService:
    """Get review session service instance."""
    global _review_session_service
    if _review_session_service is None:
        _review_session_service = ReviewSessionService(
            store=get_lore_store(),
            config=config or DEFAULT_DISCOVERY_CONFIG,
            metrics=get_discovery_metrics_collector(),
        )
    return _review_session_service


def set_lore_store(store: LoreStoreProtocol) -> None:
    """Set custom lore store (testing/override)."""
    global _lore_store, _review_session_service
    _lore_store = store
    _review_session_service = None


def reset_review_session_dependencies() -> None:
    """Reset review session singletons (testing cleanup)."""
    global _lore_store, _review_session_service
    _lore_store = None
    _review_session_service = None
