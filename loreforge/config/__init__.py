"""Configuration module for Lore Forge.

Available Configurations:
- ScannerConfig: Mention scanner context window and caps
- MatchConfig: Fuzzy matching thresholds
- CommitConfig: Persistence timeouts and write fan-out
- DiscoveryConfig: Bundle of the three
"""

from loreforge.config.discovery_config import (
    DEFAULT_DISCOVERY_CONFIG,
    DEFAULT_KIND_LIMITS,
    TEST_DISCOVERY_CONFIG,
    CommitConfig,
    DiscoveryConfig,
    MatchConfig,
    ScannerConfig,
)

__all__ = [
    "CommitConfig",
    "DiscoveryConfig",
    "MatchConfig",
    "ScannerConfig",
    "DEFAULT_DISCOVERY_CONFIG",
    "DEFAULT_KIND_LIMITS",
    "TEST_DISCOVERY_CONFIG",
]
