"""Discovery and commit metrics for Prometheus exposition.

This module provides Prometheus counters for the review cycle: how many
Discoveries each producer ingests, how commits end, and which commit
writes fail.
"""

from __future__ import annotations

import os
import threading

from prometheus_client import CollectorRegistry, Counter

from loreforge.domain.models.commit import CommitOperation, CommitResult
from loreforge.domain.models.discovery import DiscoverySource

# Thread lock for singleton initialization
_metrics_lock = threading.Lock()


class DiscoveryMetricsCollector:
    """Collects discovery and commit metrics for Prometheus.

    Attributes:
        discoveries_ingested_total: Discoveries ingested, by source.
        commits_total: Commits by outcome (success, partial, failed).
        commit_item_failures_total: Failed commit writes, by operation.
        scan_failures_total: Scans that degraded to an empty result.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize the collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "loreforge")

        self.discoveries_ingested_total = Counter(
            name="loreforge_discoveries_ingested_total",
            documentation="Discoveries ingested into review ledgers by source",
            labelnames=["source", "service", "environment"],
            registry=self._registry,
        )
        self.commits_total = Counter(
            name="loreforge_commits_total",
            documentation="Commits by outcome (success, partial, failed)",
            labelnames=["outcome", "service", "environment"],
            registry=self._registry,
        )
        self.commit_item_failures_total = Counter(
            name="loreforge_commit_item_failures_total",
            documentation="Independent commit writes that failed or timed out",
            labelnames=["operation", "timed_out", "service", "environment"],
            registry=self._registry,
        )
        self.scan_failures_total = Counter(
            name="loreforge_scan_failures_total",
            documentation="Scans that degraded to an empty Discovery list",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

    def record_ingested(self, source: DiscoverySource, count: int) -> None:
        """Record Discoveries ingested from one producer."""
        if count <= 0:
            return
        self.discoveries_ingested_total.labels(
            source=source.value,
            service=self._service_name,
            environment=self._environment,
        ).inc(count)

    def record_scan_failure(self) -> None:
        """Record a scan that degraded to an empty result."""
        self.scan_failures_total.labels(
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def record_commit(self, result: CommitResult) -> None:
        """Record the outcome of a commit and each of its item failures.

        Args:
            result: The commit result.
        """
        if not result.success:
            outcome = "failed"
        elif result.is_partial:
            outcome = "partial"
        else:
            outcome = "success"
        self.commits_total.labels(
            outcome=outcome,
            service=self._service_name,
            environment=self._environment,
        ).inc()
        for error in result.errors:
            self.record_item_failure(CommitOperation(error.operation), error.timed_out)

    def record_item_failure(self, operation: CommitOperation, timed_out: bool) -> None:
        """Record one failed commit write."""
        self.commit_item_failures_total.labels(
            operation=operation.value,
            timed_out=str(timed_out).lower(),
            service=self._service_name,
            environment=self._environment,
        ).inc()

    def get_registry(self) -> CollectorRegistry:
        """Get the collector registry."""
        return self._registry


# Singleton instance
_discovery_metrics_collector: DiscoveryMetricsCollector | None = None


def get_discovery_metrics_collector() -> DiscoveryMetricsCollector:
    """Get the singleton DiscoveryMetricsCollector instance (thread-safe).

    Uses double-checked locking for lazy initialization.
    """
    global _discovery_metrics_collector
    if _discovery_metrics_collector is None:
        with _metrics_lock:
            if _discovery_metrics_collector is None:
                _discovery_metrics_collector = DiscoveryMetricsCollector()
    return _discovery_metrics_collector


def reset_discovery_metrics_collector() -> None:
    """Reset the singleton collector (for testing only)."""
    global _discovery_metrics_collector
    with _metrics_lock:
        _discovery_metrics_collector = None
