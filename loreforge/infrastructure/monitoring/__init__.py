"""Monitoring infrastructure: Prometheus metrics collectors."""

from loreforge.infrastructure.monitoring.discovery_metrics import (
    DiscoveryMetricsCollector,
    get_discovery_metrics_collector,
    reset_discovery_metrics_collector,
)

__all__ = [
    "DiscoveryMetricsCollector",
    "get_discovery_metrics_collector",
    "reset_discovery_metrics_collector",
]
