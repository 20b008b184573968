"""Domain layer for Lore Forge.

Pure models, errors and services. Nothing in this package performs I/O.
"""
