"""Unit tests for structured logging and correlation IDs."""

import asyncio

import pytest
import structlog
from structlog.testing import capture_logs

from loreforge.application.services.base import LoggingMixin
from loreforge.bootstrap.logging import configure_structlog as bootstrap_configure
from loreforge.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from loreforge.infrastructure.observability.logging import build_processors


class TestCorrelationId:
    """Tests for correlation ID context management."""

    def test_set_and_get(self) -> None:
        """set followed by get returns the same ID."""
        set_correlation_id("review-123")

        assert get_correlation_id() == "review-123"

    def test_generated_ids_are_unique(self) -> None:
        """Each review cycle gets its own ID."""
        assert len({generate_correlation_id() for _ in range(50)}) == 50

    async def test_context_isolation_between_tasks(self) -> None:
        """Concurrent review cycles keep separate IDs."""
        results: dict[str, str] = {}

        async def cycle(name: str) -> None:
            set_correlation_id(f"id-{name}")
            await asyncio.sleep(0.01)
            results[name] = get_correlation_id()

        await asyncio.gather(cycle("a"), cycle("b"))

        assert results == {"a": "id-a", "b": "id-b"}

    def test_processor_adds_current_id(self) -> None:
        """The processor stamps entries with the current ID."""
        set_correlation_id("review-123")

        event = correlation_id_processor(None, "info", {"event": "scan_completed"})

        assert event["correlation_id"] == "review-123"

    def test_processor_keeps_bound_id(self) -> None:
        """Entries already carrying an ID keep it."""
        set_correlation_id("review-123")

        event = correlation_id_processor(None, "info", {"correlation_id": "bound"})

        assert event["correlation_id"] == "bound"

    def test_processor_without_id(self) -> None:
        """Nothing is added outside a review cycle."""
        event = correlation_id_processor(None, "info", {"event": "idle"})

        assert "correlation_id" not in event


class TestConfiguration:
    """Tests for logging configuration."""

    def test_production_renders_json(self) -> None:
        """Production output ends in the JSON renderer."""
        processors = build_processors("production")

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert correlation_id_processor in processors

    def test_development_renders_console(self) -> None:
        """Other environments use the console renderer."""
        assert isinstance(build_processors("development")[-1], structlog.dev.ConsoleRenderer)

    def test_bootstrap_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The bootstrap falls back to the ENVIRONMENT variable."""
        monkeypatch.setenv("ENVIRONMENT", "production")

        try:
            assert bootstrap_configure() == "production"
        finally:
            structlog.reset_defaults()


class TestLoggingMixin:
    """Tests for LoggingMixin."""

    class _Service(LoggingMixin):
        def __init__(self) -> None:
            self._init_logger()

        def run(self) -> None:
            self._log_operation("run", campaign_id="c-1").info("run_completed")

    def test_operation_context_is_bound(self) -> None:
        """Entries carry service, operation and correlation ID."""
        set_correlation_id("review-123")

        with capture_logs() as logs:
            self._Service().run()

        (entry,) = logs
        assert entry["event"] == "run_completed"
        assert entry["service"] == "_Service"
        assert entry["component"] == "discovery"
        assert entry["operation"] == "run"
        assert entry["correlation_id"] == "review-123"
        assert entry["campaign_id"] == "c-1"
