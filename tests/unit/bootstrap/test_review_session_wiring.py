"""Unit tests for review session bootstrap wiring."""

from collections.abc import Iterator
from uuid import uuid4

import pytest

from loreforge.application.services.review_session_service import ReviewSessionService
from loreforge.bootstrap.review_session import (
    get_lore_store,
    get_review_session_service,
    reset_review_session_dependencies,
    set_lore_store,
)
from loreforge.domain.models.review import ReviewState
from loreforge.infrastructure.stubs.lore_store_stub import LoreStoreStub


@pytest.fixture(autouse=True)
def _reset() -> Iterator[None]:
    reset_review_session_dependencies()
    yield
    reset_review_session_dependencies()


class TestWiring:
    """Tests for the bootstrap accessors."""

    def test_defaults_to_in_memory_store(self) -> None:
        """Without an override the stub store is used."""
        assert isinstance(get_lore_store(), LoreStoreStub)
        assert get_lore_store() is get_lore_store()

    def test_service_is_a_singleton(self) -> None:
        """The service is created once."""
        service = get_review_session_service()

        assert isinstance(service, ReviewSessionService)
        assert get_review_session_service() is service

    async def test_override_store(self) -> None:
        """set_lore_store() rewires the service onto the new store."""
        store = LoreStoreStub()
        set_lore_store(store)

        session = await get_review_session_service().open_session(uuid4())

        assert session.state is ReviewState.OPEN
        assert store.calls == ["list_roster"]
