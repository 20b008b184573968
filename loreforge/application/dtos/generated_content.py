"""Generator output DTOs for the application layer.

Generator output is untrusted. These Pydantic models validate the parts
the discovery engine reads: identity, narrative fields and the structured
sub-object lists. Unknown fields are kept so they still reach the
narrative scan.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from loreforge.domain.models.entity import EntityKind
from loreforge.domain.services.structured_extractor import StructuredEntry, narrative_text


class GeneratedCreature(BaseModel):
    """Creature listed in an encounter."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: Annotated[str, Field(min_length=1, description="Creature name")]
    role: Annotated[str | None, Field(default=None, description="Role in the encounter")]


class GeneratedRewardItem(BaseModel):
    """Item listed as an encounter or quest reward."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: Annotated[str, Field(min_length=1, description="Item name")]
    item_type: Annotated[
        str | None,
        Field(default=None, alias="type", description="Item type, e.g. potion"),
    ]


class GeneratedContent(BaseModel):
    """Validated generator output for one authored entity."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: Annotated[str, Field(min_length=1, description="Name of the authored entity")]
    kind: Annotated[EntityKind, Field(description="Kind of the authored entity")]
    sub_kind: Annotated[str | None, Field(default=None, description="Optional sub-kind")]
    summary: Annotated[str, Field(default="", description="Short summary")]
    description: Annotated[str, Field(default="", description="Long description")]
    read_aloud: Annotated[str, Field(default="", description="Boxed text for the table")]
    secrets: Annotated[list[str], Field(default_factory=list, description="DM-only notes")]
    contains: Annotated[
        list[str], Field(default_factory=list, description="Sub-locations of a location")
    ]
    key_members: Annotated[
        list[str], Field(default_factory=list, description="Named members of a faction")
    ]
    territory: Annotated[
        list[str], Field(default_factory=list, description="Places a faction controls")
    ]
    creatures: Annotated[
        list[GeneratedCreature],
        Field(default_factory=list, description="Creatures in an encounter"),
    ]
    reward_items: Annotated[
        list[GeneratedRewardItem],
        Field(default_factory=list, description="Rewards of an encounter or quest"),
    ]

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, value: Any) -> EntityKind:
        return EntityKind.parse(value)

    @field_validator("contains", "key_members", "territory", "secrets", mode="before")
    @classmethod
    def _drop_blank_entries(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str) and item.strip()]
        return value

    def structured_entries(self) -> list[StructuredEntry]:
        """Flatten the structured lists in output order."""
        entries: list[StructuredEntry] = []
        entries.extend(StructuredEntry("contains", name) for name in self.contains)
        entries.extend(StructuredEntry("key_members", name) for name in self.key_members)
        entries.extend(StructuredEntry("territory", name) for name in self.territory)
        entries.extend(
            StructuredEntry("creatures", creature.name, creature.role)
            for creature in self.creatures
        )
        entries.extend(
            StructuredEntry("reward_items", item.name, item.item_type)
            for item in self.reward_items
        )
        return entries

    def narrative_text(self) -> str:
        """Narrative strings of the whole output, for the mention scanner."""
        return narrative_text(self.model_dump(mode="json", by_alias=True))
