from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..clients.api_client import ClinicApiClient
from ..core.exceptions import CollaboratorUnavailableError
from ..storage.repository import KeyValueStore
from .model import ArchivedEmployee, Employee, EmployeeRoster, TimeEntry
from .repository import EmployeeDirectory

logger = logging.getLogger(__name__)

EMPLOYEES_CACHE_KEY = "employees"
TIME_ENTRIES_CACHE_KEY = "timeEntries"


class ApiEmployeeDirectory(EmployeeDirectory):
    def __init__(self, api: ClinicApiClient, cache: KeyValueStore):
        self._api = api
        self._cache = cache

    def load_roster(self) -> EmployeeRoster:
        try:
            employee_rows = self._api.get_json("/api/employees") or []
            entry_rows = self._api.get_json("/api/sqlite/time_entries") or []
        except CollaboratorUnavailableError as e:
            logger.warning("Employee API unavailable, using local cache: %s", e)
            return EmployeeRoster(
                employees=[Employee.from_api(r) for r in self._cache.get(EMPLOYEES_CACHE_KEY) or []],
                time_entries=[TimeEntry.from_api(r) for r in self._cache.get(TIME_ENTRIES_CACHE_KEY) or []],
                from_cache=True,
            )

        roster = EmployeeRoster(
            employees=[Employee.from_api(r) for r in employee_rows],
            time_entries=[TimeEntry.from_api(r) for r in entry_rows if r.get("clock_in") or r.get("date")],
        )
        self._cache.set(EMPLOYEES_CACHE_KEY, [e.to_api() for e in roster.employees])
        self._cache.set(TIME_ENTRIES_CACHE_KEY, [t.to_api() for t in roster.time_entries])
        return roster

    def archive(self, employee_id: str, *, reason: Optional[str] = None) -> None:
        self._api.post_json(f"/api/sqlite/employees/{employee_id}/archive", {"reason": reason})

    def list_archived(self) -> Sequence[ArchivedEmployee]:
        rows = self._api.get_json("/api/sqlite/employees/archive/list") or []
        return [ArchivedEmployee.from_api(r) for r in rows]

    def remove_from_cache(self, employee_id: str) -> bool:
        rows = self._cache.get(EMPLOYEES_CACHE_KEY) or []
        kept = [r for r in rows if str(r.get("id")) != str(employee_id)]
        if len(kept) == len(rows):
            return False
        self._cache.set(EMPLOYEES_CACHE_KEY, kept)
        return True
