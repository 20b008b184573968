"""Stub implementations of application ports for development and testing."""

from loreforge.infrastructure.stubs.lore_store_stub import FailureMode, LoreStoreStub

__all__ = ["FailureMode", "LoreStoreStub"]
