from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ArchivedEmployee, EmployeeRoster


class EmployeeDirectory(Protocol):
    def load_roster(self) -> EmployeeRoster:
        raise NotImplementedError

    def archive(self, employee_id: str, *, reason: Optional[str] = None) -> None:
        """Server-side archive: snapshot into employee_archive and flag the employee deleted."""

        raise NotImplementedError

    def list_archived(self) -> Sequence[ArchivedEmployee]:
        raise NotImplementedError

    def remove_from_cache(self, employee_id: str) -> bool:
        """Drop an employee from the local cache only. Returns False when it was not cached."""

        raise NotImplementedError
