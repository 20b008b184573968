"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

import os

import structlog

from loreforge.infrastructure.observability import configure_structlog as _configure_structlog

ENVIRONMENT_VAR = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"


def configure_structlog(environment: str | None = None) -> str:
    """Configure structlog for the given environment.

    Args:
        environment: Target environment; read from ENVIRONMENT when None.

    Returns:
        The environment that was configured.
    """
    environment = environment or os.getenv(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)
    _configure_structlog(environment=environment)
    structlog.get_logger().bind(component="startup_logging").info(
        "structured_logging_configured", environment=environment
    )
    return environment


__all__ = ["configure_structlog"]
