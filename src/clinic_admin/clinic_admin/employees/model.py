from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import parse_timestamp


@dataclass(frozen=True)
class Employee:
    employee_id: str
    name: str
    email: str = ""
    position: str = ""
    status: str = "active"
    is_deleted: bool = False

    @classmethod
    def from_api(cls, row: dict) -> "Employee":
        return cls(
            employee_id=str(row["id"]),
            name=str(row.get("name") or ""),
            email=str(row.get("email") or ""),
            position=str(row.get("position") or row.get("role") or ""),
            status=str(row.get("status") or "active"),
            is_deleted=bool(row.get("is_deleted", False)),
        )

    def to_api(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "email": self.email,
            "position": self.position,
            "status": self.status,
            "is_deleted": self.is_deleted,
        }


@dataclass(frozen=True)
class TimeEntry:
    """Một lượt chấm công (clock-in) của nhân viên."""

    entry_id: str
    employee_id: str
    date: datetime

    @classmethod
    def from_api(cls, row: dict) -> "TimeEntry":
        return cls(
            entry_id=str(row.get("id", "")),
            employee_id=str(row.get("employee_id", row.get("employeeId", ""))),
            date=parse_timestamp(row.get("clock_in") or row["date"]),
        )

    def to_api(self) -> dict:
        return {"id": self.entry_id, "employee_id": self.employee_id, "date": self.date.isoformat()}


@dataclass(frozen=True)
class EmployeeRoster:
    employees: list[Employee] = field(default_factory=list)
    time_entries: list[TimeEntry] = field(default_factory=list)
    from_cache: bool = False

    def find(self, employee_id: str) -> Optional[Employee]:
        for e in self.employees:
            if e.employee_id == str(employee_id):
                return e
        return None

    def time_entries_for(self, employee_id: str) -> list[TimeEntry]:
        return [t for t in self.time_entries if t.employee_id == str(employee_id)]


def _parse_snapshot(row: dict) -> dict:
    # data_snapshot is the employee row serialised as JSON at archive time
    raw = row.get("data_snapshot")
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str) and raw:
        try:
            parsed = json.loads(raw)
        except ValueError:
            return dict(row)
        return parsed if isinstance(parsed, dict) else dict(row)
    return dict(row)


@dataclass(frozen=True)
class ArchivedEmployee:
    """Row of the server-side employee archive (or its local fallback).

    ``raw`` keeps the server row untouched so exports lose nothing.
    """

    archive_id: str
    employee_id: str
    name: str
    archived_at: Optional[datetime]
    reason: Optional[str]
    email: str = ""
    position: str = ""
    status: str = "archived"
    avatar: Optional[str] = None
    snapshot: dict = field(default_factory=dict)
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, row: dict) -> "ArchivedEmployee":
        archived_at = row.get("archived_at")
        return cls(
            archive_id=str(row.get("id", "")),
            employee_id=str(row.get("employee_id", row.get("id", ""))),
            name=str(row.get("name") or ""),
            archived_at=parse_timestamp(archived_at) if archived_at else None,
            reason=row.get("archived_reason"),
            email=str(row.get("email") or ""),
            position=str(row.get("position") or ""),
            status=str(row.get("status") or "archived"),
            avatar=row.get("avatar"),
            snapshot=_parse_snapshot(row),
            raw=dict(row),
        )

    def to_dict(self) -> dict:
        return {
            **self.raw,
            "id": self.archive_id,
            "employee_id": self.employee_id,
            "name": self.name,
            "email": self.email,
            "position": self.position,
            "status": self.status,
            "avatar": self.avatar,
            "archived_at": self.archived_at.isoformat() if self.archived_at else None,
            "archived_reason": self.reason,
            "data_snapshot": self.snapshot,
        }
