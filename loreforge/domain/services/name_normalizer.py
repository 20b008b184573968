"""Name normalization shared by every discovery component.

The identity key of a name is the key used for de-duplication across the
scanner, the structured extractor, the match index and the ledger. Using
one function everywhere keeps "The Rusty Anchor Tavern - a dockside pub",
"[[the rusty anchor tavern]]" and "Rusty Anchor Tavern." on one key.
"""

from __future__ import annotations

import re

_WRAPPING_CHARS = "[]{}\"'“”‘’«»`*_"
_DESCRIPTIVE_SUFFIX = re.compile(r"\s+[-–—]+\s+|:\s|\s*[–—]\s*")
_TRAILING_PARENTHETICAL = re.compile(r"\s*[(\[][^()\[\]]*[)\]]\s*$")
_POSSESSIVE = re.compile(r"(?:'|’)s$")
_WHITESPACE = re.compile(r"\s+")
_TRAILING_PUNCTUATION = ".,;:!?"
_LEADING_ARTICLE = re.compile(r"^the\s+", re.IGNORECASE)

# Words ignored when comparing names by word overlap
_COMMON_WORDS = frozenset(
    {"the", "of", "and", "a", "an", "in", "on", "at", "to", "for", "with", "from"}
)


def clean_name(raw: object) -> str:
    """Clean a raw name into its display form.

    Strips wrapping brackets and quotes, descriptive suffixes such as
    " - a dockside pub" or ": leader", trailing parenthetical notes, a
    trailing possessive and trailing punctuation, and collapses runs of
    whitespace. Case is preserved.

    Args:
        raw: Untrusted name text.

    Returns:
        Cleaned display name, or "" when nothing name-like remains.
    """
    if not isinstance(raw, str):
        return ""
    name = raw.strip().strip(_WRAPPING_CHARS).strip()
    name = _DESCRIPTIVE_SUFFIX.split(name, maxsplit=1)[0]
    previous = None
    while previous != name:
        previous = name
        name = _TRAILING_PARENTHETICAL.sub("", name)
    name = _WHITESPACE.sub(" ", name).strip()
    name = name.rstrip(_TRAILING_PUNCTUATION).strip().strip(_WRAPPING_CHARS).strip()
    name = _POSSESSIVE.sub("", name)
    return name.rstrip(_TRAILING_PUNCTUATION).strip()


def normalize_name(raw: object) -> str:
    """Compute the identity key of a name.

    Args:
        raw: Untrusted name text.

    Returns:
        Case-folded clean name without a leading "the"; "" when nothing
        name-like remains.
    """
    return _LEADING_ARTICLE.sub("", clean_name(raw)).casefold()


def significant_words(text: str) -> set[str]:
    """Lower-cased words of three or more letters that are not filler.

    Args:
        text: Name or phrase.

    Returns:
        Set of significant words.
    """
    return {
        word
        for word in _WHITESPACE.split(normalize_name(text))
        if len(word) >= 3 and word not in _COMMON_WORDS
    }
