"""Domain services for Lore Forge.

Domain services contain the discovery and conflict logic that does not
naturally fit in a single model. They are pure: no I/O, no logging, no
infrastructure dependencies.

Available services:
- MentionScanner: Finds candidate names in narrative text
- MatchIndex: Exact and fuzzy lookup against the campaign roster
- ConflictDetector: Finds contradictions with stored facts
- DiscoveryLedger: Deterministic reducer over Discovery batches
- StructuredExtractor: Turns structured sub-objects into Discoveries
- infer / infer_relationship: Relationship kind for an entity pair
"""

from loreforge.domain.services.conflict_detector import ConflictDetector
from loreforge.domain.services.discovery_ledger import (
    DiscoveryLedger,
    merge,
    reduce_batches,
)
from loreforge.domain.services.match_index import MatchIndex, MatchKind, MatchResult
from loreforge.domain.services.mention_scanner import (
    MentionScanner,
    MentionSpan,
    infer_kind,
)
from loreforge.domain.services.name_normalizer import clean_name, normalize_name
from loreforge.domain.services.relationship_inference import (
    InferredRelationship,
    child_sub_kind,
    infer,
    infer_relationship,
)
from loreforge.domain.services.structured_extractor import (
    StructuredEntry,
    StructuredExtractor,
    narrative_text,
)

__all__ = [
    "ConflictDetector",
    "DiscoveryLedger",
    "InferredRelationship",
    "MatchIndex",
    "MatchKind",
    "MatchResult",
    "MentionScanner",
    "MentionSpan",
    "StructuredEntry",
    "StructuredExtractor",
    "child_sub_kind",
    "clean_name",
    "infer",
    "infer_kind",
    "infer_relationship",
    "merge",
    "narrative_text",
    "normalize_name",
    "reduce_batches",
]
