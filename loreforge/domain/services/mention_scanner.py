"""Mention scanner domain service.

Finds candidate names in generated narrative text and turns the ones that
do not match a known entity into pending Discoveries.

Candidate spans, in priority order:
1. Bracketed references: [[Name]] or [Name]
2. Quoted names: "Name" or “Name”
3. Capitalized multi-word runs, allowing "of", "the", "de", "von" and
   "van" inside (Order of the Flame) but never bridging on "and"
4. Single capitalized words that do not start a sentence

A span overlapping an already accepted span is dropped.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from loreforge.config.discovery_config import ScannerConfig
from loreforge.domain.errors.discovery import ScanError
from loreforge.domain.models.discovery import Discovery, DiscoverySource
from loreforge.domain.models.entity import EntityKind
from loreforge.domain.services.mention_vocabulary import (
    GENERIC_NAMES,
    GENERIC_PATTERNS,
    IGNORED_TERMS,
    KIND_PATTERNS,
    STOP_WORDS,
    TITLE_ONLY_PATTERN,
    TITLE_PATTERN,
    TITLE_PREFIX_PATTERN,
)
from loreforge.domain.services.name_normalizer import (
    clean_name,
    normalize_name,
    significant_words,
)

_CAP_WORD = r"[A-Z][a-z'’]*(?:-[A-Za-z][a-z'’]*)*"
# Lower-case words allowed inside a multi-word name; "and" joins two names
_CONNECTOR = r"(?:of|the|de|von|van)"
_QUOTED_CONNECTOR = r"(?:of|the|and|de|von|van)"

_BRACKETED = re.compile(r"\[\[([^\[\]\n]{2,80})\]\]|\[([^\[\]\n]{2,80})\]")
_QUOTED = re.compile(r"\"([^\"\n]{2,80})\"|“([^”\n]{2,80})”")
_MULTI_WORD = re.compile(
    rf"\b{_CAP_WORD}"
    rf"(?:(?:[ \t]+(?:{_CONNECTOR}[ \t]+){{0,2}}{_CAP_WORD})+(?:[ \t]+\d+)?|[ \t]+\d+)"
    r"(?![\w'’])"
)
_SINGLE_WORD = re.compile(rf"\b{_CAP_WORD}(?![\w'’])")
_SENTENCE_PUNCTUATION = re.compile(r"[.!?;]")
_WORD_SPLIT = re.compile(r"\s+")
_WHITESPACE = re.compile(r"\s+")
_SENTENCE_ENDINGS = ".!?\n\"“”:"


@dataclass(frozen=True)
class MentionSpan:
    """A candidate name found in text.

    Attributes:
        text: Span text as it appears (leading stop-words trimmed).
        start: Offset of the first character.
        end: Offset one past the last character.
        context: Surrounding text, whitespace collapsed.
    """

    text: str
    start: int
    end: int
    context: str

    @property
    def key(self) -> str:
        """Identity key of the span."""
        return normalize_name(self.text)


def infer_kind(name: str, context: str = "") -> EntityKind:
    """Suggest an entity kind for a name.

    Indicator words are looked up in the name first, then in the
    surrounding context. Honorific titles suggest an NPC.

    Args:
        name: Clean display name.
        context: Text around the mention.

    Returns:
        Suggested kind, UNCLASSIFIED when nothing indicates one.
    """
    if TITLE_PREFIX_PATTERN.match(name):
        return EntityKind.NPC
    for kind, pattern in KIND_PATTERNS:
        if pattern.search(name):
            return kind
    for kind, pattern in KIND_PATTERNS:
        if pattern.search(context):
            return kind
    if TITLE_PATTERN.search(context):
        return EntityKind.NPC
    return EntityKind.UNCLASSIFIED


class MentionScanner:
    """Domain service that extracts Discoveries from narrative text.

    Example:
        >>> scanner = MentionScanner()
        >>> found = scanner.scan("She met Captain Vale at the docks.", [])
        >>> [d.name for d in found]
        ['Captain Vale']
    """

    def __init__(self, config: ScannerConfig | None = None) -> None:
        """Initialize the scanner.

        Args:
            config: Scanner tuning. Defaults to ScannerConfig().
        """
        self._config = config or ScannerConfig()

    @property
    def config(self) -> ScannerConfig:
        """Get the scanner configuration."""
        return self._config

    def scan(
        self,
        text: str,
        known_names: Iterable[str],
        current_entity_name: str | None = None,
    ) -> list[Discovery]:
        """Scan text for mentions of entities that are not yet known.

        Args:
            text: Generated narrative text.
            known_names: Names (or identity keys) of known entities.
            current_entity_name: Name of the entity being authored; it and
                names sharing a significant word with it are excluded.

        Returns:
            Pending Discoveries in first-occurrence order, one per key.

        Raises:
            ScanError: If text is not a string.
        """
        known = {normalize_name(name) for name in known_names}
        discoveries: list[Discovery] = []
        seen: set[str] = set()
        for span in self.find_mentions(text, current_entity_name):
            key = span.key
            if not key or key in known or key in seen:
                continue
            seen.add(key)
            name = clean_name(span.text)
            discoveries.append(
                Discovery(
                    key=key,
                    name=name,
                    suggested_kind=infer_kind(name, span.context),
                    context=span.context,
                    source=DiscoverySource.SCAN,
                )
            )
        return self._apply_caps(discoveries)

    def find_mentions(
        self, text: str, current_entity_name: str | None = None
    ) -> list[MentionSpan]:
        """Find every acceptable candidate span in text.

        Unlike scan(), repeated names are all returned so callers can
        count mentions.

        Args:
            text: Generated narrative text.
            current_entity_name: Name of the entity being authored.

        Returns:
            Spans ordered by position.

        Raises:
            ScanError: If text is not a string.
        """
        if not isinstance(text, str):
            raise ScanError(f"expected str, got {type(text).__name__}")
        if not text.strip():
            return []

        accepted: list[MentionSpan] = []
        occupied: list[tuple[int, int]] = []

        def overlaps(start: int, end: int) -> bool:
            return any(start < o_end and o_start < end for o_start, o_end in occupied)

        for start, end in self._candidate_ranges(text):
            trimmed = self._trim(text, start, end)
            if trimmed is None:
                continue
            start, end = trimmed
            if overlaps(start, end):
                continue
            span_text = text[start:end]
            if not self._is_acceptable(span_text, current_entity_name):
                continue
            occupied.append((start, end))
            accepted.append(
                MentionSpan(
                    text=span_text,
                    start=start,
                    end=end,
                    context=self._context(text, start, end),
                )
            )

        accepted.sort(key=lambda span: span.start)
        return accepted

    def _candidate_ranges(self, text: str) -> Iterable[tuple[int, int]]:
        for match in _BRACKETED.finditer(text):
            group = 1 if match.group(1) is not None else 2
            yield match.start(group), match.end(group)
        for match in _QUOTED.finditer(text):
            group = 1 if match.group(1) is not None else 2
            if self._looks_like_quoted_name(match.group(group)):
                yield match.start(group), match.end(group)
        for match in _MULTI_WORD.finditer(text):
            yield match.start(), match.end()
        for match in _SINGLE_WORD.finditer(text):
            if not _starts_sentence(text, match.start()):
                yield match.start(), match.end()

    @staticmethod
    def _looks_like_quoted_name(inner: str) -> bool:
        words = _WORD_SPLIT.split(inner.strip())
        if not words or len(words) > 6:
            return False
        if _SENTENCE_PUNCTUATION.search(inner):
            return False
        # Every word but connectors must be capitalized
        return all(
            word[:1].isupper() or word[:1].isdigit() or re.fullmatch(_QUOTED_CONNECTOR, word)
            for word in words
        )

    @staticmethod
    def _trim(text: str, start: int, end: int) -> tuple[int, int] | None:
        """Drop leading and trailing stop-words, keeping a leading "The"."""
        words = [(m.start() + start, m.end() + start) for m in re.finditer(r"\S+", text[start:end])]
        while len(words) > 1:
            first = text[words[0][0] : words[0][1]].casefold()
            if first in STOP_WORDS and first != "the":
                words.pop(0)
            else:
                break
        while len(words) > 1 and text[words[-1][0] : words[-1][1]].casefold() in STOP_WORDS:
            words.pop()
        if not words:
            return None
        return words[0][0], words[-1][1]

    def _is_acceptable(self, span_text: str, current_entity_name: str | None) -> bool:
        name = clean_name(span_text)
        key = name.casefold()
        if len(name) < self._config.min_name_length:
            return False
        words = _WORD_SPLIT.split(key)
        if all(word in STOP_WORDS for word in words):
            return False
        if key in IGNORED_TERMS or key in GENERIC_NAMES:
            return False
        if all(word in IGNORED_TERMS or word in STOP_WORDS for word in words):
            return False
        if any(pattern.search(name) for pattern in GENERIC_PATTERNS):
            return False
        if TITLE_ONLY_PATTERN.match(name):
            return False
        if current_entity_name and _is_self_reference(normalize_name(name), current_entity_name):
            return False
        return True

    def _context(self, text: str, start: int, end: int) -> str:
        window = self._config.context_window_chars
        snippet = text[max(0, start - window) : end + window]
        return _WHITESPACE.sub(" ", snippet).strip()

    def _apply_caps(self, discoveries: list[Discovery]) -> list[Discovery]:
        """Keep the most specific names within per-kind and total caps."""
        if not self._config.caps_enabled:
            return discoveries
        per_kind: Counter[EntityKind] = Counter()
        kept: set[str] = set()
        for discovery in sorted(discoveries, key=lambda d: len(d.name), reverse=True):
            if len(kept) >= self._config.max_discoveries:
                break
            limit = self._config.kind_limits.get(discovery.suggested_kind)
            if limit is not None and per_kind[discovery.suggested_kind] >= limit:
                continue
            per_kind[discovery.suggested_kind] += 1
            kept.add(discovery.key)
        return [d for d in discoveries if d.key in kept]


def _starts_sentence(text: str, index: int) -> bool:
    position = index - 1
    while position >= 0 and text[position] in " \t":
        position -= 1
    return position < 0 or text[position] in _SENTENCE_ENDINGS


def _is_self_reference(key: str, current_entity_name: str) -> bool:
    current_key = normalize_name(current_entity_name)
    if not current_key:
        return False
    if key == current_key:
        return True
    return bool(significant_words(key) & significant_words(current_key))
