from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..archive.model import ArchiveEntry
from ..archive.service import ArchiveService
from ..core.constants import REASON_EMPLOYEE_ARCHIVED
from ..core.enums import EntityType
from ..core.exceptions import CollaboratorUnavailableError, NotFoundError, ValidationError
from .model import ArchivedEmployee, Employee, EmployeeRoster
from .repository import EmployeeDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeArchiveResult:
    entry: ArchiveEntry
    local_only: bool


@dataclass(frozen=True)
class ArchivedEmployeeList:
    employees: list[ArchivedEmployee]
    from_server: bool


class EmployeeService:
    """Use cases: employee listing and archival (server first, local cache as fallback)."""

    def __init__(self, directory: EmployeeDirectory, archives: ArchiveService):
        self._directory = directory
        self._archives = archives

    def load_roster(self) -> EmployeeRoster:
        return self._directory.load_roster()

    def list_active(self, roster: EmployeeRoster, *, search: str = "", status: str = "all") -> list[Employee]:
        archived = self._archives.archived_ids(EntityType.EMPLOYEE)
        term = (search or "").strip().lower()
        return [
            e
            for e in roster.employees
            if not e.is_deleted
            and e.employee_id not in archived
            and (not term or term in e.name.lower() or term in e.email.lower())
            and (status == "all" or e.status == status)
        ]

    def archive_employee(
        self,
        roster: EmployeeRoster,
        employee_id: str,
        *,
        reason: str = REASON_EMPLOYEE_ARCHIVED,
        now: Optional[datetime] = None,
    ) -> EmployeeArchiveResult:
        employee = roster.find(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        entry = self._archives.new_entry(EntityType.EMPLOYEE, name=employee.name, reason=reason, now=now)

        local_only = False
        try:
            self._directory.archive(employee.employee_id, reason=reason)
        except CollaboratorUnavailableError as e:
            logger.warning("Server archive of employee %s failed, falling back to local cache: %s", employee_id, e)
            if not self._directory.remove_from_cache(employee.employee_id):
                raise
            local_only = True

        self._archives.record(EntityType.EMPLOYEE, employee.employee_id, entry)
        return EmployeeArchiveResult(entry=entry, local_only=local_only)

    def list_archived(self) -> ArchivedEmployeeList:
        try:
            return ArchivedEmployeeList(employees=list(self._directory.list_archived()), from_server=True)
        except CollaboratorUnavailableError as e:
            logger.warning("Employee archive list unavailable, using local archive entries: %s", e)

        local = []
        for view in self._archives.browse(EntityType.EMPLOYEE).entities:
            latest = view.entries[-1].entry
            local.append(
                ArchivedEmployee(
                    archive_id=view.entity_id,
                    employee_id=view.entity_id,
                    name=latest.name,
                    archived_at=latest.archived_at,
                    reason=latest.reason,
                    snapshot=latest.to_dict(),
                )
            )
        return ArchivedEmployeeList(employees=local, from_server=False)

    def export_archived(self) -> list[dict]:
        archived = self.list_archived().employees
        if not archived:
            raise ValidationError("No archived employees to export")
        return [a.to_dict() for a in archived]

    def get_archived(self, archive_id: str) -> ArchivedEmployee:
        for row in self.list_archived().employees:
            if row.archive_id == str(archive_id):
                return row
        raise NotFoundError("Employee not found")
