"""Conflict detection domain service.

Compares statements the generator made about existing entities with the
facts already stored about them. Only entities the new text explicitly
references are examined, so the work is proportional to the references
and not to the campaign roster.

Policy:
- status, owner, quantity and location are structured attributes,
  compared on normalized values (quantities numerically)
- any other named attribute is free text; a textual difference is a
  free-text conflict resolved only by a human
- statements without an attribute are prose and are never compared
- only the current stored Fact per (entity, attribute) is used

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from uuid import UUID

from loreforge.domain.models.conflict import Conflict, ConflictKind
from loreforge.domain.models.fact import Fact, GeneratedStatement, current_facts

STRUCTURED_ATTRIBUTES: frozenset[str] = frozenset({"status", "owner", "quantity", "location"})
NUMERIC_ATTRIBUTES: frozenset[str] = frozenset({"quantity"})

_WHITESPACE = re.compile(r"\s+")
_NUMBER = re.compile(r"^[-+]?\d+(?:\.\d+)?$")


def normalize_value(value: str) -> str:
    """Case-fold, collapse whitespace and drop trailing punctuation."""
    return _WHITESPACE.sub(" ", value).strip().rstrip(".!;,").strip().casefold()


def values_agree(attribute: str, new_value: str, old_value: str) -> bool:
    """Check whether two values of an attribute say the same thing.

    Args:
        attribute: Lower-cased attribute name.
        new_value: Generated value.
        old_value: Stored value.

    Returns:
        True when the values are equal after normalization.
    """
    new_norm = normalize_value(new_value)
    old_norm = normalize_value(old_value)
    if attribute in NUMERIC_ATTRIBUTES and _NUMBER.match(new_norm) and _NUMBER.match(old_norm):
        return float(new_norm) == float(old_norm)
    return new_norm == old_norm


class ConflictDetector:
    """Domain service that finds contradictions with stored facts.

    Example:
        >>> detector = ConflictDetector()
        >>> conflicts = detector.detect(statements, stored, {vale_id})
        >>> [c.attribute for c in conflicts]
        ['status']
    """

    def detect(
        self,
        generated: Iterable[GeneratedStatement],
        stored: Iterable[Fact],
        referenced_entity_ids: Iterable[UUID],
        entity_names: Mapping[UUID, str] | None = None,
    ) -> list[Conflict]:
        """Detect conflicts between generated statements and stored facts.

        When several statements name the same (entity, attribute), the
        last one is the generator's final word and is the one compared.

        Args:
            generated: Statements about existing entities.
            stored: Stored facts of the referenced entities.
            referenced_entity_ids: Entities the new text references.
            entity_names: Optional display names for the conflicts.

        Returns:
            Unresolved conflicts in first-statement order.
        """
        referenced = set(referenced_entity_ids)
        if not referenced:
            return []
        names = entity_names or {}
        current = current_facts(fact for fact in stored if fact.entity_id in referenced)

        latest: dict[tuple[UUID, str], GeneratedStatement] = {}
        for statement in generated:
            if statement.entity_id not in referenced or not statement.attribute:
                continue
            attribute = statement.attribute.strip().lower()
            if not attribute:
                continue
            key = (statement.entity_id, attribute)
            # Assignment keeps the first position of a repeated attribute
            latest[key] = statement

        conflicts: list[Conflict] = []
        for (entity_id, attribute), statement in latest.items():
            fact = current.get((entity_id, attribute))
            if fact is None:
                continue
            new_value = statement.asserted_value
            old_value = fact.stated_value
            if values_agree(attribute, new_value, old_value):
                continue
            conflicts.append(
                Conflict(
                    conflict_id=Conflict.make_id(entity_id, attribute),
                    entity_id=entity_id,
                    attribute=attribute,
                    new_text=new_value,
                    old_text=old_value,
                    existing_fact_id=fact.fact_id,
                    kind=(
                        ConflictKind.STRUCTURED
                        if attribute in STRUCTURED_ATTRIBUTES
                        else ConflictKind.FREE_TEXT
                    ),
                    entity_name=names.get(entity_id),
                )
            )
        return conflicts
