from __future__ import annotations

import logging

from ..core.enums import EntityType
from ..storage.repository import KeyValueStore
from .model import ArchiveEntry, ArchiveSettings, ArchiveStore
from .repository import ArchiveRepository

logger = logging.getLogger(__name__)

STORE_KEYS = {
    EntityType.PATIENT: "patientArchives",
    EntityType.EMPLOYEE: "employeeArchives",
}

SETTINGS_KEYS = {
    EntityType.PATIENT: "archiveSettings",
    EntityType.EMPLOYEE: "employeeArchiveSettings",
}


class KeyValueArchiveRepository(ArchiveRepository):
    """Archive bookkeeping kept as JSON documents in a key-value store."""

    def __init__(self, kv: KeyValueStore):
        self._kv = kv

    def load_store(self, entity_type: EntityType) -> ArchiveStore:
        raw = self._kv.get(STORE_KEYS[entity_type])
        if not isinstance(raw, dict):
            return {}

        store: ArchiveStore = {}
        for entity_id, items in raw.items():
            if not isinstance(items, list):
                logger.warning("Skipping malformed archive list for %s %s: %r", entity_type.label, entity_id, items)
                continue

            entries: list[ArchiveEntry] = []
            for item in items:
                if not isinstance(item, dict):
                    logger.warning("Skipping malformed archive entry for %s %s: %r", entity_type.label, entity_id, item)
                    continue
                try:
                    entries.append(ArchiveEntry.from_dict(item))
                except (KeyError, TypeError, ValueError):
                    logger.warning("Skipping malformed archive entry for %s %s: %r", entity_type.label, entity_id, item)
            if entries:
                store[str(entity_id)] = entries
        return store

    def save_store(self, entity_type: EntityType, store: ArchiveStore) -> None:
        doc = {key: [e.to_dict() for e in entries] for key, entries in store.items() if entries}
        self._kv.set(STORE_KEYS[entity_type], doc)

    def load_settings(self, entity_type: EntityType) -> ArchiveSettings:
        return ArchiveSettings.from_dict(self._kv.get(SETTINGS_KEYS[entity_type]))

    def save_settings(self, entity_type: EntityType, settings: ArchiveSettings) -> None:
        self._kv.set(SETTINGS_KEYS[entity_type], settings.to_dict())
