"""Application DTOs (Data Transfer Objects).

Pydantic models validating untrusted generator output before it reaches
the domain services.
"""

from loreforge.application.dtos.generated_content import (
    GeneratedContent,
    GeneratedCreature,
    GeneratedRewardItem,
)

__all__ = [
    "GeneratedContent",
    "GeneratedCreature",
    "GeneratedRewardItem",
]
