"""Unit tests for name normalization.

Every discovery component keys names the same way, so these cases pin
down what collapses onto one identity key.
"""

import pytest

from loreforge.domain.services.name_normalizer import (
    clean_name,
    normalize_name,
    significant_words,
)


class TestCleanName:
    """Tests for clean_name()."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("The Rusty Anchor Tavern - a dockside pub", "The Rusty Anchor Tavern"),
            ("[[The Rusty Anchor Tavern]]", "The Rusty Anchor Tavern"),
            ("The Rusty Anchor Tavern.", "The Rusty Anchor Tavern"),
            ("Mira (the innkeeper)", "Mira"),
            ("Grimm: leader of the watch", "Grimm"),
            ("Vale's", "Vale"),
            ("  Captain   Vale  ", "Captain Vale"),
            ('"Stormwatch Keep"', "Stormwatch Keep"),
        ],
    )
    def test_strips_decoration(self, raw: str, expected: str) -> None:
        """Decoration around a name is removed, case is kept."""
        assert clean_name(raw) == expected

    def test_non_string_yields_empty(self) -> None:
        """Untrusted non-string input cleans to nothing."""
        assert clean_name(None) == ""
        assert clean_name(42) == ""

    def test_punctuation_only_yields_empty(self) -> None:
        """Input with no name-like content cleans to nothing."""
        assert clean_name("[[ ]]") == ""


class TestNormalizeName:
    """Tests for normalize_name()."""

    def test_variants_share_one_key(self) -> None:
        """Suffixed, bracketed and punctuated variants collapse."""
        keys = {
            normalize_name("The Rusty Anchor Tavern - a dockside pub"),
            normalize_name("[[the rusty anchor tavern]]"),
            normalize_name("The Rusty Anchor Tavern."),
            normalize_name("Rusty Anchor Tavern"),
        }

        assert keys == {"rusty anchor tavern"}

    def test_leading_article_is_folded_from_key_only(self) -> None:
        """"The X" and "X" share a key; the display name keeps the article."""
        assert normalize_name("The Gilded Hand") == normalize_name("gilded hand")
        assert clean_name("The Gilded Hand") == "The Gilded Hand"
        assert normalize_name("Theros Keep") == "theros keep"

    def test_key_is_idempotent(self) -> None:
        """Normalizing a key returns the same key."""
        key = normalize_name("Captain Vale's")

        assert normalize_name(key) == key


class TestSignificantWords:
    """Tests for significant_words()."""

    def test_drops_filler_and_short_words(self) -> None:
        """Articles, connectors and short words are ignored."""
        assert significant_words("The Order of the Silver Flame") == {
            "order",
            "silver",
            "flame",
        }

    def test_empty_text(self) -> None:
        """Empty text has no significant words."""
        assert significant_words("") == set()
