"""
Persistence for the Digimon GM Assistant.

This module provides:
- EntityKind: the four stored entity kinds
- EntityStore: SQLite-backed get / list / insert / update / delete
"""

from src.storage.entity_store import ENTITY_CLASSES, EntityKind, EntityStore

__all__ = [
    "ENTITY_CLASSES",
    "EntityKind",
    "EntityStore",
]
