"""
Lore Forge - Discovery & Commit Engine

Turns free-form generated narrative into a de-duplicated lore graph:
candidate entity mentions become reviewable Discoveries, contradictions
with recorded facts become reviewable Conflicts, and a human-approved
commit writes the primary entity, its stubs and relationship edges.

Core rules:
- Nothing is persisted until commit is explicitly invoked
- Recorded facts are append-only, never rewritten
- A side-effect failure never loses the authored entity
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
