"""Word lists used by the mention scanner.

Stop-words and game-system terms are never entities even when they are
capitalized. Indicator words suggest an entity kind when they occur in a
name or near it.
"""

from __future__ import annotations

import re

from loreforge.domain.models.entity import EntityKind

# Capitalized words that begin sentences or clauses but never name anything
STOP_WORDS: frozenset[str] = frozenset(
    word.casefold()
    for word in (
        "A", "An", "The", "This", "That", "They", "There", "These", "Those",
        "He", "She", "It", "We", "You", "His", "Her", "Its", "Their", "Our",
        "When", "Where", "What", "Which", "Who", "Whom", "Why", "How",
        "However", "Although", "Because", "Therefore", "Furthermore",
        "Moreover", "Nevertheless", "Meanwhile", "Otherwise", "Indeed",
        "Perhaps", "Certainly", "Probably", "Obviously", "Clearly", "Simply",
        "Actually", "Basically", "Essentially", "Generally", "Normally",
        "Usually", "Often", "Sometimes", "Always", "Never", "Here", "Now",
        "Then", "Today", "Tomorrow", "Yesterday", "Later", "Soon", "Before",
        "After", "During", "While", "Until", "Since", "Once", "Twice",
        "First", "Second", "Third", "Finally", "Last", "Next", "Another",
        "Other", "Each", "Every", "Both", "Either", "Neither", "Many", "Most",
        "Some", "Any", "All", "None", "Few", "Several", "Much", "More", "Less",
        "Least", "Very", "Quite", "Rather", "Almost", "Nearly", "Hardly",
        "Barely", "Just", "Only", "Even", "Still", "Already", "Yet", "Not",
        "No", "Yes", "And", "But", "Or", "For", "Nor", "So", "With",
        "Without", "Within", "Beyond", "Against", "Among", "Between",
        "Through", "Throughout", "Across", "Around", "About", "Above",
        "Below", "Under", "Over", "Behind", "Beside", "Inside", "Outside",
        "Into", "Onto", "Upon", "From", "Toward", "Towards", "If", "Unless",
        "As", "At", "By", "In", "On", "Of", "To", "Up", "Down", "Out",
        "Whatever", "Whoever", "Whenever", "Wherever", "Despite", "Though",
        "Also", "Thus", "Hence", "Instead", "Besides", "Above all",
    )
)

# Game-system vocabulary that is capitalized in rules text
IGNORED_TERMS: frozenset[str] = frozenset(
    term.casefold()
    for term in (
        # Abilities and core mechanics
        "Strength", "Dexterity", "Constitution", "Intelligence", "Wisdom",
        "Charisma", "Armor Class", "Hit Points", "Hit Dice", "Spell Slots",
        "Proficiency Bonus", "Saving Throw", "Ability Check", "Skill Check",
        "Initiative", "Advantage", "Disadvantage", "Concentration",
        "Resistance", "Vulnerability", "Immunity", "Action", "Bonus Action",
        "Reaction", "Movement", "Opportunity Attack", "Ranged Attack",
        "Melee Attack", "Critical Hit", "Natural Twenty", "Spell Save",
        "Death Save", "Death Saving Throw", "Attack", "Damage", "Armor",
        "Class", "Level", "Hit", "Points", "Spell", "Challenge Rating",
        # Classes
        "Barbarian", "Bard", "Cleric", "Druid", "Fighter", "Monk", "Paladin",
        "Ranger", "Rogue", "Sorcerer", "Warlock", "Wizard", "Artificer",
        # Ancestries
        "Human", "Elf", "Dwarf", "Halfling", "Gnome", "Half-Elf", "Half-Orc",
        "Tiefling", "Dragonborn", "Aasimar", "Genasi", "Goliath", "Tabaxi",
        "Kenku", "Firbolg", "Triton", "Changeling", "Warforged", "Goblin",
        "Hobgoblin", "Bugbear", "Kobold", "Orc", "Lizardfolk", "Tortle",
        # Creature types
        "Dragon", "Giant", "Undead", "Fiend", "Celestial", "Fey",
        "Elemental", "Construct", "Monstrosity", "Aberration", "Ooze",
        "Plant", "Beast", "Humanoid",
        # Equipment
        "Weapon", "Shield", "Sword", "Bow", "Arrow", "Staff", "Wand", "Ring",
        "Potion", "Scroll", "Longsword", "Shortsword", "Greatsword",
        "Rapier", "Scimitar", "Dagger", "Battleaxe", "Greataxe", "Handaxe",
        "Warhammer", "Maul", "Flail", "Morningstar", "Quarterstaff",
        "Chain Mail", "Plate Armor", "Leather Armor", "Half Plate",
        # Currency
        "Gold", "Silver", "Copper", "Platinum", "Electrum",
        # Schools of magic
        "Abjuration", "Conjuration", "Divination", "Enchantment",
        "Evocation", "Illusion", "Necromancy", "Transmutation", "Arcane",
        "Divine", "Primal", "Psionic",
        # Conditions
        "Blinded", "Charmed", "Deafened", "Frightened", "Grappled",
        "Incapacitated", "Invisible", "Paralyzed", "Petrified", "Poisoned",
        "Prone", "Restrained", "Stunned", "Unconscious", "Exhaustion",
        # Damage types
        "Bludgeoning", "Piercing", "Slashing", "Fire", "Cold", "Lightning",
        "Thunder", "Acid", "Poison", "Necrotic", "Radiant", "Force", "Psychic",
        # Alignments
        "Lawful Good", "Neutral Good", "Chaotic Good", "Lawful Neutral",
        "True Neutral", "Chaotic Neutral", "Lawful Evil", "Neutral Evil",
        "Chaotic Evil",
        # Weapon properties
        "Finesse", "Versatile", "Two-Handed", "Light", "Heavy", "Reach",
        "Thrown", "Loading", "Ammunition", "Special",
        # Time
        "Dawn", "Dusk", "Midnight", "Noon", "Morning", "Evening", "Night",
        "Day", "Week", "Month", "Year", "Century", "Age", "Era",
        # Directions
        "North", "South", "East", "West", "Northeast", "Northwest",
        "Southeast", "Southwest",
        # Generic fantasy words
        "Magic", "Magical", "Curse", "Cursed", "Blessing", "Blessed", "Holy",
        "Unholy", "Sacred", "Profane", "Enchanted", "Forged", "Crafted",
        "Created", "Imbued", "Mundane", "Ancient", "Lost", "Hidden",
        "Secret", "Forbidden", "Legendary", "Mythical", "Artifact",
        "Unknown", "Various", "Multiple",
        # Generated-output section headings
        "Appearance", "Personality", "Motivation", "Description", "Summary",
        "Read Aloud", "Secrets", "Hooks", "Plot Hook", "Loot", "Rewards",
        "Mechanics", "Notes", "Stat Block",
    )
)

# Plural nouns that name groups, not individuals
GENERIC_NAMES: frozenset[str] = frozenset(
    {
        "guards", "soldiers", "mercenaries", "bandits", "villagers",
        "townsfolk", "citizens", "people", "council", "party", "adventurers",
        "cultists", "pirates", "nobles", "merchants", "priests",
    }
)

GENERIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(?:a|an)\s+\w+$", re.IGNORECASE),
    re.compile(r"^(?:some|many|few|several)\s+", re.IGNORECASE),
    re.compile(
        r"^the\s+(?:leader|enemy|guard|merchant|soldier|commander|captain)s?$",
        re.IGNORECASE,
    ),
)

TITLE_PREFIXES: tuple[str, ...] = (
    "lord", "lady", "king", "queen", "prince", "princess", "duke", "duchess",
    "baron", "baroness", "count", "countess", "earl", "marquis", "viscount",
    "sir", "dame", "master", "mistress", "captain", "commander", "general",
    "admiral", "chief", "doctor", "professor", "elder", "priestess",
    "archmage", "archdruid", "father", "mother", "brother", "sister", "saint",
    "high priest", "grand master",
)

# Ordered: the first kind whose words appear wins
KIND_INDICATORS: tuple[tuple[EntityKind, tuple[str, ...]], ...] = (
    (
        EntityKind.LOCATION,
        (
            "tavern", "inn", "pub", "city", "village", "town", "hamlet",
            "forest", "woods", "grove", "mountain", "mountains", "peak", "hill",
            "hills", "river", "lake", "ocean", "sea", "bay", "island", "coast",
            "castle", "keep", "fortress", "tower", "dungeon", "cave", "cavern",
            "mine", "temple", "shrine", "market", "district", "quarter",
            "street", "road", "bridge", "gate", "wall", "harbor", "harbour",
            "docks", "warehouse", "kingdom", "realm", "region", "province",
            "territory", "valley", "swamp", "marsh", "desert", "ruins",
            "citadel", "manor", "estate", "camp", "outpost", "located",
            "situated", "found in", "lies in", "stands in", "sub-location",
        ),
    ),
    (
        EntityKind.FACTION,
        (
            "guild", "order", "brotherhood", "sisterhood", "clan", "tribe",
            "house", "family", "organization", "society", "cult", "church",
            "army", "legion", "company", "band", "faction", "alliance",
            "council", "syndicate", "circle", "consortium", "member of",
            "belongs to", "joined", "leader of",
        ),
    ),
    (
        EntityKind.ITEM,
        (
            "sword", "blade", "ring", "amulet", "necklace", "potion", "elixir",
            "staff", "wand", "weapon", "armor", "shield", "helm", "boots",
            "gloves", "cloak", "robe", "artifact", "relic", "treasure", "gem",
            "jewel", "crystal", "orb", "tome", "book", "scroll", "crown",
            "wielded", "carried", "worn", "holds", "possesses", "reward",
        ),
    ),
    (
        EntityKind.CREATURE,
        (
            "beast", "monster", "creature", "wyrm", "drake", "wolf", "troll",
            "ogre", "spider", "serpent", "hydra", "horror", "lurker", "swarm",
            "stalker", "devours", "prowls", "lair",
        ),
    ),
    (
        EntityKind.QUEST,
        (
            "quest", "mission", "task", "objective", "prophecy", "bounty",
            "errand", "pilgrimage",
        ),
    ),
    (
        EntityKind.ENCOUNTER,
        ("ambush", "skirmish", "battle", "encounter", "raid", "siege"),
    ),
)


def _word_pattern(words: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(word) for word in sorted(words, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


KIND_PATTERNS: tuple[tuple[EntityKind, re.Pattern[str]], ...] = tuple(
    (kind, _word_pattern(words)) for kind, words in KIND_INDICATORS
)

TITLE_PATTERN: re.Pattern[str] = _word_pattern(TITLE_PREFIXES)
TITLE_PREFIX_PATTERN: re.Pattern[str] = re.compile(
    rf"^(?:{'|'.join(re.escape(t) for t in TITLE_PREFIXES)})\s+\S",
    re.IGNORECASE,
)

# A span made only of honorifics ("the Captain", "Lord") names nobody
TITLE_ONLY_PATTERN: re.Pattern[str] = re.compile(
    rf"^(?:the\s+)?(?:{'|'.join(re.escape(t) for t in TITLE_PREFIXES)})"
    rf"(?:\s+(?:{'|'.join(re.escape(t) for t in TITLE_PREFIXES)}))*$",
    re.IGNORECASE,
)
