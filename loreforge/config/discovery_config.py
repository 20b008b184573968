"""Discovery and commit configuration.

This module defines tuning for the mention scanner, the match index and
the commit coordinator, with environment variable overrides.

Environment Variables (Scanner):
- LOREFORGE_CONTEXT_WINDOW_CHARS: Context captured on each side of a mention (default: 50)
- LOREFORGE_MIN_NAME_LENGTH: Shortest name kept as a Discovery (default: 4)
- LOREFORGE_MAX_SCAN_DISCOVERIES: Cap on Discoveries per scan, 0 disables caps (default: 15)

Environment Variables (Match Index):
- LOREFORGE_FUZZY_THRESHOLD: Minimum similarity for a fuzzy match (default: 0.85)
- LOREFORGE_CONTAINMENT_FLOOR: Score given to substring containment (default: 0.6)
- LOREFORGE_CONTAINMENT_MIN_LENGTH: Shortest key considered for containment (default: 4)

Environment Variables (Commit):
- LOREFORGE_PERSISTENCE_TIMEOUT: Seconds allowed per persistence call (default: 10.0)
- LOREFORGE_MAX_CONCURRENT_WRITES: Concurrent stub/relationship writes (default: 8)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from loreforge.domain.models.entity import EntityKind


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


# Per-kind caps keep a single scan from flooding the reviewer
DEFAULT_KIND_LIMITS: dict[EntityKind, int] = {
    EntityKind.NPC: 7,
    EntityKind.LOCATION: 4,
    EntityKind.FACTION: 3,
    EntityKind.ITEM: 3,
    EntityKind.CREATURE: 3,
    EntityKind.QUEST: 2,
    EntityKind.ENCOUNTER: 2,
    EntityKind.UNCLASSIFIED: 3,
}


@dataclass(frozen=True)
class ScannerConfig:
    """Configuration for the mention scanner.

    Attributes:
        context_window_chars: Characters of context kept on each side.
        min_name_length: Names shorter than this are dropped as generic.
        max_discoveries: Total cap per scan. 0 disables all caps.
        kind_limits: Per-kind caps applied before the total cap.
    """

    context_window_chars: int = 50
    min_name_length: int = 4
    max_discoveries: int = 15
    kind_limits: dict[EntityKind, int] = field(
        default_factory=lambda: dict(DEFAULT_KIND_LIMITS)
    )

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.context_window_chars < 0:
            raise ValueError(
                f"context_window_chars must be non-negative, got {self.context_window_chars}"
            )
        if self.min_name_length < 1:
            raise ValueError(
                f"min_name_length must be positive, got {self.min_name_length}"
            )
        if self.max_discoveries < 0:
            raise ValueError(
                f"max_discoveries must be non-negative, got {self.max_discoveries}"
            )

    @property
    def caps_enabled(self) -> bool:
        """True when per-kind and total caps apply."""
        return self.max_discoveries > 0

    @classmethod
    def from_environment(cls) -> ScannerConfig:
        """Create config from environment variables with defaults."""
        return cls(
            context_window_chars=_get_int_env("LOREFORGE_CONTEXT_WINDOW_CHARS", 50),
            min_name_length=_get_int_env("LOREFORGE_MIN_NAME_LENGTH", 4),
            max_discoveries=_get_int_env("LOREFORGE_MAX_SCAN_DISCOVERIES", 15),
        )


@dataclass(frozen=True)
class MatchConfig:
    """Configuration for the dedup/match index.

    Attributes:
        fuzzy_threshold: Minimum similarity (0-1) for a fuzzy match.
        containment_floor: Minimum score reported for containment matches.
        containment_min_length: Shorter keys never match by containment.
    """

    fuzzy_threshold: float = 0.85
    containment_floor: float = 0.6
    containment_min_length: int = 4

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 0.0 < self.fuzzy_threshold <= 1.0:
            raise ValueError(
                f"fuzzy_threshold must be in (0, 1], got {self.fuzzy_threshold}"
            )
        if not 0.0 <= self.containment_floor <= 1.0:
            raise ValueError(
                f"containment_floor must be in [0, 1], got {self.containment_floor}"
            )
        if self.containment_min_length < 1:
            raise ValueError(
                "containment_min_length must be positive, "
                f"got {self.containment_min_length}"
            )

    @classmethod
    def from_environment(cls) -> MatchConfig:
        """Create config from environment variables with defaults."""
        return cls(
            fuzzy_threshold=_get_float_env("LOREFORGE_FUZZY_THRESHOLD", 0.85),
            containment_floor=_get_float_env("LOREFORGE_CONTAINMENT_FLOOR", 0.6),
            containment_min_length=_get_int_env("LOREFORGE_CONTAINMENT_MIN_LENGTH", 4),
        )


@dataclass(frozen=True)
class CommitConfig:
    """Configuration for the commit coordinator.

    Attributes:
        persistence_timeout_seconds: Timeout applied to each store call.
        max_concurrent_writes: Fan-out bound for independent writes.
    """

    persistence_timeout_seconds: float = 10.0
    max_concurrent_writes: int = 8

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.persistence_timeout_seconds <= 0:
            raise ValueError(
                "persistence_timeout_seconds must be positive, "
                f"got {self.persistence_timeout_seconds}"
            )
        if self.max_concurrent_writes < 1:
            raise ValueError(
                f"max_concurrent_writes must be at least 1, got {self.max_concurrent_writes}"
            )

    @classmethod
    def from_environment(cls) -> CommitConfig:
        """Create config from environment variables with defaults."""
        return cls(
            persistence_timeout_seconds=_get_float_env(
                "LOREFORGE_PERSISTENCE_TIMEOUT", 10.0
            ),
            max_concurrent_writes=_get_int_env("LOREFORGE_MAX_CONCURRENT_WRITES", 8),
        )


@dataclass(frozen=True)
class DiscoveryConfig:
    """Bundle of scanner, match and commit configuration."""

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    match: MatchConfig = field(default_factory=MatchConfig)
    commit: CommitConfig = field(default_factory=CommitConfig)

    @classmethod
    def from_environment(cls) -> DiscoveryConfig:
        """Create the full config from environment variables."""
        return cls(
            scanner=ScannerConfig.from_environment(),
            match=MatchConfig.from_environment(),
            commit=CommitConfig.from_environment(),
        )


# Default configuration
DEFAULT_DISCOVERY_CONFIG = DiscoveryConfig()

# Test configuration: no caps, short timeouts
TEST_DISCOVERY_CONFIG = DiscoveryConfig(
    scanner=ScannerConfig(max_discoveries=0),
    commit=CommitConfig(persistence_timeout_seconds=0.5, max_concurrent_writes=4),
)
