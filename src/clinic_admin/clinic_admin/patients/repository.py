from __future__ import annotations

from typing import Protocol

from .model import Patient, PatientRoster


class PatientDirectory(Protocol):
    """Giao diện tới nguồn dữ liệu bệnh nhân (REST backend + cache cục bộ).

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp HTTP.
    """

    def load_roster(self) -> PatientRoster:
        raise NotImplementedError

    def create_patient(self, payload: dict) -> Patient:
        raise NotImplementedError

    def soft_delete(self, patient_id: str) -> None:
        raise NotImplementedError
