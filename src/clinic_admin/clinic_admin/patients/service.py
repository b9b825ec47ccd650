from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..archive.model import ArchiveEntry
from ..archive.service import ArchiveService
from ..common.validators import normalize_name, require_non_empty
from ..core.constants import REASON_MANUAL_DELETE
from ..core.enums import EntityStatus, EntityType
from ..core.exceptions import NotFoundError, ValidationError
from .model import ArchivedPatientDetails, Patient, PatientRoster
from .repository import PatientDirectory


def build_full_name(first_name: str, middle_name: Optional[str], last_name: str) -> str:
    middle = f"{middle_name.strip()} " if middle_name and middle_name.strip() else ""
    return f"{first_name.strip()} {middle}{last_name.strip()}"


class PatientService:
    """Use cases: active patient listing, creation and soft-delete into the archive."""

    def __init__(self, directory: PatientDirectory, archives: ArchiveService):
        self._directory = directory
        self._archives = archives

    def load_roster(self) -> PatientRoster:
        return self._directory.load_roster()

    def list_active(self, roster: PatientRoster, *, search: str = "", status: str = "all") -> list[Patient]:
        """Patients shown in the main list: neither soft-deleted nor archived."""

        archived = self._archives.archived_ids(EntityType.PATIENT)
        term = (search or "").strip().lower()

        out = []
        for p in roster.patients:
            if p.is_deleted or p.patient_id in archived:
                continue
            if term and term not in p.name.lower() and term not in p.mobile.lower():
                continue
            if status != "all" and p.status != status:
                continue
            out.append(p)
        return out

    def create_patient(
        self,
        roster: PatientRoster,
        *,
        first_name: str,
        last_name: str,
        middle_name: Optional[str] = None,
        mobile: str = "",
        status: str = EntityStatus.ACTIVE.value,
    ) -> Patient:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        name = build_full_name(first_name, middle_name, last_name)

        if status not in {s.value for s in EntityStatus}:
            raise ValidationError("Invalid patient status")

        self._ensure_name_available(roster, name)

        return self._directory.create_patient(
            {
                "name": name,
                "first_name": first_name,
                "middle_name": (middle_name or "").strip(),
                "last_name": last_name,
                "mobile": "".join(ch for ch in mobile if ch.isdigit())[:11],
                "status": status,
            }
        )

    def _ensure_name_available(self, roster: PatientRoster, name: str) -> None:
        # A name may be reused only when every same-named record is archived.
        wanted = normalize_name(name)
        archived = self._archives.archived_ids(EntityType.PATIENT)
        for p in roster.patients:
            if normalize_name(p.name) != wanted:
                continue
            if not p.is_deleted and p.patient_id not in archived:
                raise ValidationError(
                    "A patient with this name already exists. "
                    "You can only reuse a name if the previous patient is archived."
                )

    def delete_patient(self, roster: PatientRoster, patient_id: str, *, now: Optional[datetime] = None) -> ArchiveEntry:
        """Soft-delete on the server, then keep a local archive entry with its purge date."""

        patient = roster.find(patient_id)
        if not patient:
            raise NotFoundError("Patient not found")

        entry = self._archives.new_entry(EntityType.PATIENT, name=patient.name, reason=REASON_MANUAL_DELETE, now=now)
        self._directory.soft_delete(patient.patient_id)
        return self._archives.record(EntityType.PATIENT, patient.patient_id, entry)

    def archived_details(self, roster: PatientRoster, patient_id: str) -> ArchivedPatientDetails:
        entries = self._archives.entries(EntityType.PATIENT, patient_id)
        if not entries:
            raise NotFoundError("Archive entry not found")
        return ArchivedPatientDetails(
            patient_id=str(patient_id),
            entries=entries,
            appointments=sorted(roster.appointments_for(patient_id), key=lambda a: a.date, reverse=True),
        )
