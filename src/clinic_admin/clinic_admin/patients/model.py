from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..archive.model import ArchiveEntry
from ..common.datetime_utils import parse_timestamp


@dataclass(frozen=True)
class Patient:
    """Hồ sơ bệnh nhân (bản rút gọn phục vụ lưu trữ)."""

    patient_id: str
    name: str
    status: str = "active"
    mobile: str = ""
    is_deleted: bool = False

    @classmethod
    def from_api(cls, row: dict) -> "Patient":
        name = row.get("name")
        if not name:
            parts = [row.get("first_name") or row.get("firstName"), row.get("middle_name") or row.get("middleName"),
                     row.get("last_name") or row.get("lastName")]
            name = " ".join(p for p in parts if p)
        return cls(
            patient_id=str(row["id"]),
            name=str(name or ""),
            status=str(row.get("status") or "active"),
            mobile=str(row.get("mobile") or row.get("contact_number") or row.get("contactNumber") or ""),
            is_deleted=bool(row.get("is_deleted", False)),
        )

    def to_api(self) -> dict:
        return {
            "id": self.patient_id,
            "name": self.name,
            "status": self.status,
            "mobile": self.mobile,
            "is_deleted": self.is_deleted,
        }


@dataclass(frozen=True)
class Appointment:
    appointment_id: str
    patient_id: str
    date: datetime
    status: Optional[str] = None
    treatment: Optional[str] = None

    @classmethod
    def from_api(cls, row: dict) -> "Appointment":
        return cls(
            appointment_id=str(row.get("id", "")),
            patient_id=str(row.get("patientId", row.get("patient_id", ""))),
            date=parse_timestamp(row["date"]),
            status=row.get("status"),
            treatment=row.get("treatment"),
        )

    def to_api(self) -> dict:
        return {
            "id": self.appointment_id,
            "patientId": self.patient_id,
            "date": self.date.isoformat(),
            "status": self.status,
            "treatment": self.treatment,
        }


@dataclass(frozen=True)
class PatientRoster:
    """Application state for patient screens: what was fetched, and from where."""

    patients: list[Patient] = field(default_factory=list)
    appointments: list[Appointment] = field(default_factory=list)
    from_cache: bool = False

    def find(self, patient_id: str) -> Optional[Patient]:
        for p in self.patients:
            if p.patient_id == str(patient_id):
                return p
        return None

    def appointments_for(self, patient_id: str) -> list[Appointment]:
        return [a for a in self.appointments if a.patient_id == str(patient_id)]


@dataclass(frozen=True)
class ArchivedPatientDetails:
    patient_id: str
    entries: list[ArchiveEntry]
    appointments: list[Appointment]
