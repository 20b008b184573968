"""Application layer for Lore Forge.

Ports to external collaborators, DTOs for untrusted generator output, and
the async services that coordinate review and commit.
"""
