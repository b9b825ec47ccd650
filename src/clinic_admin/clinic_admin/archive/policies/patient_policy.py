from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...core.enums import EntityType
from ...patients.model import Patient, PatientRoster
from .base import ArchivePolicy


class PatientArchivePolicy(ArchivePolicy):
    """Patients: activity is the appointment history."""

    entity_type = EntityType.PATIENT

    def entities(self, roster: PatientRoster) -> Sequence[Patient]:
        return [p for p in roster.patients if not p.is_deleted]

    def entity_id(self, entity: Patient) -> str:
        return entity.patient_id

    def display_name(self, entity: Patient) -> str:
        return entity.name

    def activity_dates(self, entity: Patient, roster: PatientRoster) -> list[datetime]:
        return [a.date for a in roster.appointments_for(entity.patient_id)]
