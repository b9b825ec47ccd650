from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import parse_timestamp, to_iso
from ..core.constants import (
    DEFAULT_ARCHIVE_MONTHS,
    DEFAULT_RETENTION_DAYS,
    MAX_ARCHIVE_MONTHS,
    MAX_RETENTION_DAYS,
    MIN_RETENTION_DAYS,
)


@dataclass(frozen=True)
class ArchiveEntry:
    """One historical archival of an entity.

    ``name`` is a snapshot taken at archive time; later renames do not touch it.
    Entries without ``expiry_date`` predate retention settings and never expire.
    """

    archived_at: datetime
    name: str
    reason: str
    expiry_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ArchiveEntry":
        expiry = data.get("expiryDate")
        return cls(
            archived_at=parse_timestamp(data["archivedAt"]),
            name=str(data.get("name") or ""),
            reason=str(data.get("reason") or ""),
            expiry_date=parse_timestamp(expiry) if expiry else None,
        )

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "archivedAt": to_iso(self.archived_at),
            "name": self.name,
            "reason": self.reason,
        }
        if self.expiry_date is not None:
            out["expiryDate"] = to_iso(self.expiry_date)
        return out


def _bounded_int(value: Any, default: int, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if not low <= value <= high:
        return default
    return int(value)


@dataclass(frozen=True)
class ArchiveSettings:
    enabled: bool = True
    months: int = DEFAULT_ARCHIVE_MONTHS
    retention_days: int = DEFAULT_RETENTION_DAYS

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ArchiveSettings":
        data = data if isinstance(data, dict) else {}
        return cls(
            enabled=data.get("enabled") is not False,
            months=_bounded_int(data.get("months"), DEFAULT_ARCHIVE_MONTHS, 0, MAX_ARCHIVE_MONTHS),
            retention_days=_bounded_int(
                data.get("retentionDays"), DEFAULT_RETENTION_DAYS, MIN_RETENTION_DAYS, MAX_RETENTION_DAYS
            ),
        )

    def to_dict(self) -> dict:
        return {"enabled": self.enabled, "months": self.months, "retentionDays": self.retention_days}


ArchiveStore = dict[str, list[ArchiveEntry]]


@dataclass(frozen=True)
class EligibilityRow:
    """Read-model cho bảng quản lý lưu trữ (archive manager)."""

    entity_id: str
    name: str
    last_activity: Optional[datetime]
    eligible: bool
    archive_count: int


@dataclass(frozen=True)
class ArchivedEntryView:
    index: int
    entry: ArchiveEntry
    expired: bool


@dataclass(frozen=True)
class ArchivedEntityView:
    entity_id: str
    name: str
    entries: list[ArchivedEntryView]


@dataclass(frozen=True)
class ArchiveBrowser:
    entities: list[ArchivedEntityView]
    has_expired: bool
