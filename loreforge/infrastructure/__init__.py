"""Infrastructure layer for Lore Forge.

Adapters and cross-cutting concerns: structured logging, correlation,
Prometheus metrics and the in-memory store adapter.
"""
