"""
Pytest configuration and shared fixtures for Lore Forge tests.

Testing Standards:
- All async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Store interactions use LoreStoreStub, never a real database
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from uuid import UUID, uuid4

import pytest
from prometheus_client import CollectorRegistry

from loreforge.config.discovery_config import TEST_DISCOVERY_CONFIG, DiscoveryConfig
from loreforge.domain.models.entity import Entity, EntityKind
from loreforge.infrastructure.monitoring.discovery_metrics import (
    DiscoveryMetricsCollector,
)
from loreforge.infrastructure.observability.correlation import set_correlation_id
from loreforge.infrastructure.stubs.lore_store_stub import LoreStoreStub


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from loreforge import __version__

    return __version__


@pytest.fixture(autouse=True)
def _clear_correlation_id() -> None:
    """Start every test without a correlation ID."""
    set_correlation_id("")


@pytest.fixture
def campaign_id() -> UUID:
    """Campaign every test entity belongs to."""
    return uuid4()


@pytest.fixture
def config() -> DiscoveryConfig:
    """Uncapped scanner and short store timeouts."""
    return TEST_DISCOVERY_CONFIG


@pytest.fixture
def store() -> LoreStoreStub:
    """Create a fresh in-memory lore store."""
    return LoreStoreStub()


@pytest.fixture
def registry() -> CollectorRegistry:
    """Isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> DiscoveryMetricsCollector:
    """Metrics collector bound to an isolated registry."""
    return DiscoveryMetricsCollector(registry=registry)


@pytest.fixture
def captain_vale(store: LoreStoreStub, campaign_id: UUID) -> Entity:
    """A known NPC seeded in the store."""
    return store.add_entity(
        Entity(
            entity_id=uuid4(),
            campaign_id=campaign_id,
            name="Captain Vale",
            kind=EntityKind.NPC,
        )
    )


@pytest.fixture
def saltmarsh(store: LoreStoreStub, campaign_id: UUID) -> Entity:
    """A known settlement seeded in the store."""
    return store.add_entity(
        Entity(
            entity_id=uuid4(),
            campaign_id=campaign_id,
            name="Saltmarsh",
            kind=EntityKind.LOCATION,
            sub_kind="settlement",
        )
    )
