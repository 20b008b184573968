"""Unit tests for the generator output DTOs."""

import pytest
from pydantic import ValidationError

from loreforge.application.dtos.generated_content import GeneratedContent
from loreforge.domain.models.entity import EntityKind


class TestGeneratedContent:
    """Tests for GeneratedContent validation and flattening."""

    def test_kind_aliases_parse(self) -> None:
        """Loose kind labels map onto the closed kind set."""
        content = GeneratedContent.model_validate({"name": "Gloomfang", "kind": "monster"})

        assert content.kind is EntityKind.CREATURE

    def test_name_is_required(self) -> None:
        """Output without a name is rejected."""
        with pytest.raises(ValidationError):
            GeneratedContent.model_validate({"name": "", "kind": "npc"})

    def test_structured_entries_in_output_order(self) -> None:
        """Every structured list is flattened with its field name."""
        content = GeneratedContent.model_validate(
            {
                "name": "Ambush at Blackwater Ford",
                "kind": "encounter",
                "creatures": [{"name": "Gloomfang", "role": "ambusher"}],
                "reward_items": [{"name": "Tidecaller Pearl", "type": "trinket"}],
                "contains": None,
            }
        )

        entries = content.structured_entries()

        assert [(e.field, e.name, e.detail) for e in entries] == [
            ("creatures", "Gloomfang", "ambusher"),
            ("reward_items", "Tidecaller Pearl", "trinket"),
        ]

    def test_narrative_text_includes_extra_fields(self) -> None:
        """Unknown generator fields still reach the scanner."""
        content = GeneratedContent.model_validate(
            {
                "name": "Mira Voss",
                "kind": "npc",
                "description": "A quiet clerk with a sharp memory.",
                "rumors": ["She once served Captain Vale."],
            }
        )

        text = content.narrative_text()

        assert "A quiet clerk with a sharp memory." in text
        assert "She once served Captain Vale." in text
