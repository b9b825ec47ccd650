from __future__ import annotations

from typing import Protocol

from ..core.enums import EntityType
from .model import ArchiveSettings, ArchiveStore


class ArchiveRepository(Protocol):
    """Persistence port for archive stores and archive settings (one of each per entity type)."""

    def load_store(self, entity_type: EntityType) -> ArchiveStore:
        raise NotImplementedError

    def save_store(self, entity_type: EntityType, store: ArchiveStore) -> None:
        raise NotImplementedError

    def load_settings(self, entity_type: EntityType) -> ArchiveSettings:
        raise NotImplementedError

    def save_settings(self, entity_type: EntityType, settings: ArchiveSettings) -> None:
        raise NotImplementedError
