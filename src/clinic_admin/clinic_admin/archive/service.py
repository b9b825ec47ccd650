from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_utc, parse_timestamp
from ..common.validators import require_int, require_range
from ..core.constants import MAX_ARCHIVE_MONTHS, MAX_RETENTION_DAYS, MIN_RETENTION_DAYS, REASON_AUTO_INACTIVE
from ..core.enums import EntityType
from ..core.exceptions import NotFoundError
from . import store as archive_store
from .expiry import calculate_expiry
from .factory import ArchivePolicyFactory
from .model import (
    ArchiveBrowser,
    ArchivedEntityView,
    ArchivedEntryView,
    ArchiveEntry,
    ArchiveSettings,
    EligibilityRow,
)
from .repository import ArchiveRepository

logger = logging.getLogger(__name__)


def _as_utc(now: Optional[datetime]) -> datetime:
    return parse_timestamp(now) if now else now_utc()


class ArchiveService:
    """Use cases: archive settings, archival, archive browsing and retention purge."""

    def __init__(self, archives: ArchiveRepository, *, policy_factory: ArchivePolicyFactory | None = None):
        self._archives = archives
        self._policies = policy_factory or ArchivePolicyFactory()

    # -- settings ---------------------------------------------------------

    def get_settings(self, entity_type: EntityType) -> ArchiveSettings:
        return self._archives.load_settings(entity_type)

    def save_settings(self, entity_type: EntityType, *, enabled: bool, months: Any, retention_days: Any) -> ArchiveSettings:
        """Validate and persist settings; on error the stored settings stay as they were."""

        months_i = require_range(
            require_int(months, "Inactivity window"), "Inactivity window", 0, MAX_ARCHIVE_MONTHS, unit="months"
        )
        retention_i = require_range(
            require_int(retention_days, "Retention period"),
            "Retention period",
            MIN_RETENTION_DAYS,
            MAX_RETENTION_DAYS,
            unit="day",
        )

        settings = ArchiveSettings(enabled=bool(enabled), months=months_i, retention_days=retention_i)
        self._archives.save_settings(entity_type, settings)
        return settings

    # -- store reads ------------------------------------------------------

    def entries(self, entity_type: EntityType, entity_id: str) -> list[ArchiveEntry]:
        return archive_store.get(self._archives.load_store(entity_type), entity_id)

    def archived_ids(self, entity_type: EntityType) -> set[str]:
        return set(self._archives.load_store(entity_type))

    def is_archived(self, entity_type: EntityType, entity_id: str) -> bool:
        return bool(self.entries(entity_type, entity_id))

    def get_entry(self, entity_type: EntityType, entity_id: str, index: int) -> ArchiveEntry:
        entries = self.entries(entity_type, entity_id)
        if not 0 <= index < len(entries):
            raise NotFoundError("Archive entry not found")
        return entries[index]

    # -- archival ---------------------------------------------------------

    def new_entry(
        self,
        entity_type: EntityType,
        *,
        name: str,
        reason: str,
        now: Optional[datetime] = None,
    ) -> ArchiveEntry:
        """Build an entry with its purge date without storing it yet."""

        now = _as_utc(now)
        settings = self._archives.load_settings(entity_type)
        return ArchiveEntry(
            archived_at=now,
            name=name,
            reason=reason,
            expiry_date=calculate_expiry(settings.retention_days, now=now),
        )

    def record(self, entity_type: EntityType, entity_id: str, entry: ArchiveEntry) -> ArchiveEntry:
        store = archive_store.append(self._archives.load_store(entity_type), entity_id, entry)
        self._archives.save_store(entity_type, store)
        logger.info("Archived %s %s (%s), expires %s", entity_type.label, entity_id, entry.reason, entry.expiry_date)
        return entry

    def archive(
        self,
        entity_type: EntityType,
        entity_id: str,
        *,
        name: str,
        reason: str,
        now: Optional[datetime] = None,
    ) -> ArchiveEntry:
        """Manual archival (soft-delete). Always appends a new entry."""

        return self.record(entity_type, entity_id, self.new_entry(entity_type, name=name, reason=reason, now=now))

    def archive_eligible(self, entity_type: EntityType, roster: Any, *, now: Optional[datetime] = None) -> list[str]:
        """Automatic archival of every eligible entity in ``roster``.

        Entities that already hold an unexpired archive entry are skipped, so
        repeated sweeps do not stack duplicate snapshots.
        """

        now = _as_utc(now)
        policy = self._policies.for_entity_type(entity_type)
        settings = self._archives.load_settings(entity_type)
        store = self._archives.load_store(entity_type)
        reason = REASON_AUTO_INACTIVE.format(entity=entity_type.label)

        archived: list[str] = []
        for entity in policy.entities(roster):
            entity_id = policy.entity_id(entity)
            if archive_store.has_unexpired_entry(archive_store.get(store, entity_id), now):
                continue
            if not policy.is_eligible(entity, roster, settings, now=now):
                continue

            entry = ArchiveEntry(
                archived_at=now,
                name=policy.display_name(entity),
                reason=reason,
                expiry_date=calculate_expiry(settings.retention_days, now=now),
            )
            store = archive_store.append(store, entity_id, entry)
            archived.append(entity_id)

        if archived:
            self._archives.save_store(entity_type, store)
            logger.info("Automatic archive created %d %s snapshot(s)", len(archived), entity_type.label)
        return archived

    def eligibility_overview(self, entity_type: EntityType, roster: Any, *, now: Optional[datetime] = None) -> list[EligibilityRow]:
        now = _as_utc(now)
        policy = self._policies.for_entity_type(entity_type)
        settings = self._archives.load_settings(entity_type)
        store = self._archives.load_store(entity_type)

        rows = []
        for entity in policy.entities(roster):
            entity_id = policy.entity_id(entity)
            rows.append(
                EligibilityRow(
                    entity_id=entity_id,
                    name=policy.display_name(entity),
                    last_activity=policy.last_activity(entity, roster),
                    eligible=policy.is_eligible(entity, roster, settings, now=now),
                    archive_count=len(archive_store.get(store, entity_id)),
                )
            )
        return rows

    # -- browsing & deletion ---------------------------------------------

    def browse(self, entity_type: EntityType, *, roster: Any = None, now: Optional[datetime] = None) -> ArchiveBrowser:
        """Archive browser: every archived entity with its entries and expiry flags.

        The name comes from the live roster when the entity is still known,
        otherwise from the most recent snapshot.
        """

        now = _as_utc(now)
        policy = self._policies.for_entity_type(entity_type)
        store = self._archives.load_store(entity_type)

        live_names: dict[str, str] = {}
        if roster is not None:
            for entity in policy.entities(roster):
                live_names[policy.entity_id(entity)] = policy.display_name(entity)

        views: list[ArchivedEntityView] = []
        has_expired = False
        for entity_id, entries in store.items():
            entry_views = []
            for idx, entry in enumerate(entries):
                expired = archive_store.is_expired(entry, now)
                has_expired = has_expired or expired
                entry_views.append(ArchivedEntryView(index=idx, entry=entry, expired=expired))

            name = live_names.get(entity_id) or entries[-1].name or f"{entity_type.label.title()} ID: {entity_id}"
            views.append(ArchivedEntityView(entity_id=entity_id, name=name, entries=entry_views))

        return ArchiveBrowser(entities=views, has_expired=has_expired)

    def delete_entry(self, entity_type: EntityType, entity_id: str, index: int) -> None:
        store = archive_store.remove(self._archives.load_store(entity_type), entity_id, index)
        self._archives.save_store(entity_type, store)

    # -- purge ------------------------------------------------------------

    def purge_expired(self, entity_type: EntityType, *, now: Optional[datetime] = None) -> int:
        """Manual purge. Errors propagate to the caller."""

        store, purged = archive_store.purge_expired(self._archives.load_store(entity_type), _as_utc(now))
        if purged > 0:
            self._archives.save_store(entity_type, store)
            logger.info("Purged %d expired %s archive(s)", purged, entity_type.label)
        return purged

    def purge_expired_silently(self, entity_type: EntityType, *, now: Optional[datetime] = None) -> int:
        """Automatic purge: failures are logged and reported as zero purged."""

        try:
            return self.purge_expired(entity_type, now=now)
        except Exception:
            logger.exception("Automatic purge of %s archives failed", entity_type.label)
            return 0

    def purge_all_silently(self, *, now: Optional[datetime] = None) -> dict[EntityType, int]:
        return {entity_type: self.purge_expired_silently(entity_type, now=now) for entity_type in EntityType}
