from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import EntityType
from .policies.base import ArchivePolicy
from .policies.employee_policy import EmployeeArchivePolicy
from .policies.patient_policy import PatientArchivePolicy


@dataclass
class ArchivePolicyFactory:
    """Factory Pattern: choose the archive policy for an entity type."""

    def for_entity_type(self, entity_type: EntityType) -> ArchivePolicy:
        if entity_type == EntityType.PATIENT:
            return PatientArchivePolicy()
        if entity_type == EntityType.EMPLOYEE:
            return EmployeeArchivePolicy()
        raise ValueError(f"Unsupported entity type: {entity_type!r}")
