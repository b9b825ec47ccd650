from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...core.enums import EntityType
from ...employees.model import Employee, EmployeeRoster
from .base import ArchivePolicy


class EmployeeArchivePolicy(ArchivePolicy):
    """Employees: activity is the clock-in history."""

    entity_type = EntityType.EMPLOYEE

    def entities(self, roster: EmployeeRoster) -> Sequence[Employee]:
        return [e for e in roster.employees if not e.is_deleted]

    def entity_id(self, entity: Employee) -> str:
        return entity.employee_id

    def display_name(self, entity: Employee) -> str:
        return entity.name

    def activity_dates(self, entity: Employee, roster: EmployeeRoster) -> list[datetime]:
        return [t.date for t in roster.time_entries_for(entity.employee_id)]
