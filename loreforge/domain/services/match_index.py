"""Dedup/match index domain service.

Built once per review cycle from the campaign roster. Answers whether a
name refers to a known entity: exactly (identity key equality) or
fuzzily (similarity ratio or whole-word containment).

Fuzzy matches are advisory. They annotate a Discovery with a suggested
entity and a confidence; they never link automatically.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from rapidfuzz import fuzz

from loreforge.config.discovery_config import MatchConfig
from loreforge.domain.models.entity import RosterEntry
from loreforge.domain.services.name_normalizer import normalize_name


class MatchKind(Enum):
    """How a name matched the roster."""

    NONE = "none"
    EXACT = "exact"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a roster lookup.

    Attributes:
        kind: Match kind.
        entity_id: Matched entity, None when kind is NONE.
        score: Similarity in [0, 1]; 1.0 for exact matches.
        entry: Matched roster entry.
    """

    kind: MatchKind
    entity_id: UUID | None = None
    score: float = 0.0
    entry: RosterEntry | None = None

    @classmethod
    def no_match(cls) -> MatchResult:
        """Create a NONE result."""
        return cls(kind=MatchKind.NONE)

    @property
    def is_exact(self) -> bool:
        """True for identity-key matches."""
        return self.kind is MatchKind.EXACT

    @property
    def is_match(self) -> bool:
        """True for exact or fuzzy matches."""
        return self.kind is not MatchKind.NONE


class MatchIndex:
    """In-memory index of known entities keyed by identity.

    Example:
        >>> index = MatchIndex([RosterEntry(uuid4(), "Captain Vale", EntityKind.NPC)])
        >>> index.match("captain vale.").kind
        <MatchKind.EXACT: 'exact'>
    """

    def __init__(
        self,
        roster: Iterable[RosterEntry] = (),
        config: MatchConfig | None = None,
    ) -> None:
        """Build the index.

        Args:
            roster: Known entities.
            config: Match tuning. Defaults to MatchConfig().
        """
        self._config = config or MatchConfig()
        self._by_key: dict[str, RosterEntry] = {}
        self._by_id: dict[UUID, RosterEntry] = {}
        for entry in roster:
            self.register(entry)

    @classmethod
    def empty(cls, config: MatchConfig | None = None) -> MatchIndex:
        """Create an index with no known entities."""
        return cls((), config)

    def __len__(self) -> int:
        return len(self._by_id)

    @property
    def config(self) -> MatchConfig:
        """Get the match configuration."""
        return self._config

    @property
    def known_keys(self) -> frozenset[str]:
        """Identity keys of every indexed entity."""
        return frozenset(self._by_key)

    def entries(self) -> list[RosterEntry]:
        """All indexed entries in registration order."""
        return list(self._by_id.values())

    def register(self, entry: RosterEntry) -> None:
        """Add an entity, e.g. one created earlier in the same commit.

        The first entry registered under a key keeps it.
        """
        key = normalize_name(entry.name)
        if not key:
            return
        self._by_id[entry.entity_id] = entry
        self._by_key.setdefault(key, entry)

    def entry(self, entity_id: UUID) -> RosterEntry | None:
        """Look up an entry by entity id."""
        return self._by_id.get(entity_id)

    def get(self, name: str) -> RosterEntry | None:
        """Look up an entry by exact identity key."""
        return self._by_key.get(normalize_name(name))

    def match(self, name: str) -> MatchResult:
        """Match a name against the roster.

        Args:
            name: Raw or clean name.

        Returns:
            EXACT on identity-key equality, otherwise the best FUZZY
            candidate at or above the threshold, otherwise NONE.
        """
        key = normalize_name(name)
        if not key:
            return MatchResult.no_match()

        exact = self._by_key.get(key)
        if exact is not None:
            return MatchResult(
                kind=MatchKind.EXACT, entity_id=exact.entity_id, score=1.0, entry=exact
            )

        best: tuple[float, str] | None = None
        for known_key, entry in self._by_key.items():
            score = self._similarity(key, known_key)
            if score is None:
                continue
            candidate = (score, known_key)
            # Highest score wins; ties go to the lexicographically smaller key
            if best is None or score > best[0] or (score == best[0] and known_key < best[1]):
                best = candidate

        if best is None:
            return MatchResult.no_match()
        entry = self._by_key[best[1]]
        return MatchResult(
            kind=MatchKind.FUZZY, entity_id=entry.entity_id, score=best[0], entry=entry
        )

    def _similarity(self, key: str, known_key: str) -> float | None:
        """Score two keys, None when they do not match at all."""
        ratio = fuzz.ratio(key, known_key) / 100.0
        if ratio >= self._config.fuzzy_threshold:
            return ratio
        if self._contains_whole_words(key, known_key):
            return max(ratio, self._config.containment_floor)
        return None

    def _contains_whole_words(self, a: str, b: str) -> bool:
        shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
        if len(shorter) < self._config.containment_min_length:
            return False
        pattern = rf"(?<!\w){re.escape(shorter)}(?!\w)"
        return re.search(pattern, longer) is not None
