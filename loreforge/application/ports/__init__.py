"""Application ports (interfaces to external collaborators)."""

from loreforge.application.ports.lore_store import LoreStoreProtocol

__all__ = ["LoreStoreProtocol"]
