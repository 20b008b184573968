"""Unit tests for DiscoveryMetricsCollector."""

from uuid import uuid4

import pytest
from prometheus_client import CollectorRegistry

from loreforge.domain.errors.commit import CommitFatalError, CommitItemError
from loreforge.domain.models.commit import CommitOperation, CommitResult
from loreforge.domain.models.discovery import DiscoverySource
from loreforge.domain.models.entity import Entity, EntityKind
from loreforge.infrastructure.monitoring.discovery_metrics import (
    DiscoveryMetricsCollector,
    get_discovery_metrics_collector,
    reset_discovery_metrics_collector,
)

LABELS = {"service": "loreforge", "environment": "test"}


@pytest.fixture
def collector(monkeypatch: pytest.MonkeyPatch) -> DiscoveryMetricsCollector:
    """Collector with fixed labels and an isolated registry."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("SERVICE_NAME", "loreforge")
    return DiscoveryMetricsCollector(registry=CollectorRegistry())


def _value(collector: DiscoveryMetricsCollector, name: str, **labels: str) -> float | None:
    return collector.get_registry().get_sample_value(name, {**labels, **LABELS})


class TestCounters:
    """Tests for the recording methods."""

    def test_record_ingested(self, collector: DiscoveryMetricsCollector) -> None:
        """Ingested Discoveries are counted per source."""
        collector.record_ingested(DiscoverySource.SCAN, 3)
        collector.record_ingested(DiscoverySource.SCAN, 2)
        collector.record_ingested(DiscoverySource.STRUCTURED, 0)

        assert _value(collector, "loreforge_discoveries_ingested_total", source="scan") == 5.0
        assert (
            _value(collector, "loreforge_discoveries_ingested_total", source="structured")
            is None
        )

    def test_record_commit_outcomes(self, collector: DiscoveryMetricsCollector) -> None:
        """Commits are counted as success, partial or failed."""
        entity = Entity(uuid4(), uuid4(), "The Gilded Hand", EntityKind.FACTION)
        partial = CommitResult(
            success=True,
            entity=entity,
            errors=[CommitItemError("old tomas", "create_stub", "timed out", timed_out=True)],
        )

        collector.record_commit(CommitResult(success=True, entity=entity))
        collector.record_commit(partial)
        collector.record_commit(CommitResult.failed(CommitFatalError("X", "down")))

        for outcome in ("success", "partial", "failed"):
            assert _value(collector, "loreforge_commits_total", outcome=outcome) == 1.0
        assert (
            _value(
                collector,
                "loreforge_commit_item_failures_total",
                operation=CommitOperation.CREATE_STUB.value,
                timed_out="true",
            )
            == 1.0
        )

    def test_record_scan_failure(self, collector: DiscoveryMetricsCollector) -> None:
        """Degraded scans are counted."""
        collector.record_scan_failure()

        assert _value(collector, "loreforge_scan_failures_total") == 1.0


class TestSingleton:
    """Tests for the singleton accessors."""

    def test_singleton_and_reset(self) -> None:
        """The accessor returns one instance until reset."""
        reset_discovery_metrics_collector()
        first = get_discovery_metrics_collector()

        assert get_discovery_metrics_collector() is first

        reset_discovery_metrics_collector()
        assert get_discovery_metrics_collector() is not first
        reset_discovery_metrics_collector()
