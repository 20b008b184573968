"""Base service logging mixin.

This module provides the LoggingMixin class for standardized structured
logging across application services.

Usage:
    from loreforge.application.services.base import LoggingMixin

    class MyService(LoggingMixin):
        def __init__(self, store: LoreStoreProtocol) -> None:
            self._store = store
            self._init_logger()

        async def do_something(self) -> None:
            log = self._log_operation("do_something", campaign_id="123")
            log.info("operation_started")
"""

import structlog

from loreforge.infrastructure.observability.correlation import get_correlation_id
from loreforge.infrastructure.observability.logging import get_logger_for_service


class LoggingMixin:
    """Mixin providing structured logging for services.

    The logger is bound with:
    - service: The class name of the service
    - component: The component type (default: "discovery")

    Each operation gets:
    - operation: The name of the operation being performed
    - correlation_id: The review cycle's correlation ID
    - Any additional context passed to _log_operation()

    Attributes:
        _log: The structlog BoundLogger for this service instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "discovery") -> None:
        """Initialize the logger with service name binding.

        Args:
            component: The component type for log categorization.
        """
        self._log = get_logger_for_service(self.__class__.__name__, component)

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create an operation-scoped logger with correlation ID.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation and correlation context.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
