"""Structured sub-object extraction.

Generator output for locations, factions and encounters carries lists of
named sub-objects (sub-locations, key members, territory, creatures,
rewards). Each entry becomes a pending Discovery whose kind is fixed by
the field it came from, so it survives later re-scans of the narrative.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from loreforge.domain.models.discovery import Discovery, DiscoverySource
from loreforge.domain.models.entity import EntityKind
from loreforge.domain.services.name_normalizer import clean_name, normalize_name

# Strings shorter than this are labels, not narrative
MIN_NARRATIVE_LENGTH = 10
MAX_NARRATIVE_DEPTH = 5


@dataclass(frozen=True)
class StructuredField:
    """How entries of one structured field become Discoveries.

    Attributes:
        kind: Kind every entry of the field is given.
        context_template: Context text; {parent} is the parent name and
            {detail} an optional " (role)" suffix.
    """

    kind: EntityKind
    context_template: str


STRUCTURED_FIELDS: dict[str, StructuredField] = {
    "contains": StructuredField(EntityKind.LOCATION, "Sub-location within {parent}"),
    "key_members": StructuredField(EntityKind.NPC, "Key member of {parent}"),
    "territory": StructuredField(EntityKind.LOCATION, "Territory controlled by {parent}"),
    "creatures": StructuredField(EntityKind.CREATURE, "Creature in {parent}{detail}"),
    "reward_items": StructuredField(EntityKind.ITEM, "Reward from {parent}{detail}"),
}


@dataclass(frozen=True)
class StructuredEntry:
    """One named entry of a structured list.

    Attributes:
        field: Structured field name (a key of STRUCTURED_FIELDS).
        name: Raw entry name, possibly with a descriptive suffix.
        detail: Optional role or type shown in the context.
    """

    field: str
    name: str
    detail: str | None = None


class StructuredExtractor:
    """Domain service turning structured sub-objects into Discoveries.

    Example:
        >>> extractor = StructuredExtractor()
        >>> entries = [StructuredEntry("contains", "Warehouse 7")]
        >>> [d.name for d in extractor.extract("Saltmarsh Docks", entries, set())]
        ['Warehouse 7']
    """

    def extract(
        self,
        parent_name: str,
        entries: Iterable[StructuredEntry],
        known_keys: Iterable[str] = (),
    ) -> list[Discovery]:
        """Extract pending Discoveries from structured entries.

        Entries naming a known entity or the parent itself are skipped,
        and repeated entries collapse onto their first occurrence.

        Args:
            parent_name: Name of the entity being authored.
            entries: Structured entries in output order.
            known_keys: Identity keys of known entities.

        Returns:
            Pending Discoveries with provenance STRUCTURED.
        """
        known = set(known_keys)
        parent_key = normalize_name(parent_name)
        parent_label = clean_name(parent_name) or "the parent"
        discoveries: list[Discovery] = []
        seen: set[str] = set()

        for entry in entries:
            rule = STRUCTURED_FIELDS.get(entry.field)
            if rule is None:
                continue
            name = clean_name(entry.name)
            key = normalize_name(name)
            if not key or key == parent_key or key in known or key in seen:
                continue
            seen.add(key)
            detail = f" ({entry.detail.strip()})" if entry.detail and entry.detail.strip() else ""
            discoveries.append(
                Discovery(
                    key=key,
                    name=name,
                    suggested_kind=rule.kind,
                    context=rule.context_template.format(parent=parent_label, detail=detail),
                    source=DiscoverySource.STRUCTURED,
                    origin_field=entry.field,
                )
            )
        return discoveries


def narrative_text(payload: Any) -> str:
    """Collect narrative strings from generator output for scanning.

    Walks nested mappings and sequences up to a fixed depth and keeps
    every string longer than MIN_NARRATIVE_LENGTH characters.

    Args:
        payload: Generator output as plain data.

    Returns:
        Strings joined by blank lines.
    """
    collected: list[str] = []

    def walk(node: Any, depth: int) -> None:
        if depth > MAX_NARRATIVE_DEPTH:
            return
        if isinstance(node, str):
            if len(node) > MIN_NARRATIVE_LENGTH:
                collected.append(node)
        elif isinstance(node, Mapping):
            for value in node.values():
                walk(value, depth + 1)
        elif isinstance(node, (list, tuple)):
            for item in node:
                walk(item, depth + 1)

    walk(payload, 0)
    return "\n\n".join(collected)
