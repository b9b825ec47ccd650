from __future__ import annotations

import logging

from ..clients.api_client import ClinicApiClient
from ..core.exceptions import CollaboratorUnavailableError
from ..storage.repository import KeyValueStore
from .model import Appointment, Patient, PatientRoster
from .repository import PatientDirectory

logger = logging.getLogger(__name__)

PATIENTS_CACHE_KEY = "patients"
APPOINTMENTS_CACHE_KEY = "appointments"


class ApiPatientDirectory(PatientDirectory):
    """Patients and appointments from the REST backend, cached locally.

    When the backend is unavailable the last cached lists are served instead.
    """

    def __init__(self, api: ClinicApiClient, cache: KeyValueStore):
        self._api = api
        self._cache = cache

    def load_roster(self) -> PatientRoster:
        try:
            patient_rows = self._api.get_json("/api/patients", params={"includeInactive": "true"}) or []
            appointment_rows = self._api.get_json("/api/appointments") or []
        except CollaboratorUnavailableError as e:
            logger.warning("Patient API unavailable, using local cache: %s", e)
            return PatientRoster(
                patients=[Patient.from_api(r) for r in self._cache.get(PATIENTS_CACHE_KEY) or []],
                appointments=[Appointment.from_api(r) for r in self._cache.get(APPOINTMENTS_CACHE_KEY) or []],
                from_cache=True,
            )

        roster = PatientRoster(
            patients=[Patient.from_api(r) for r in patient_rows],
            appointments=[Appointment.from_api(r) for r in appointment_rows if r.get("date")],
        )
        self._cache.set(PATIENTS_CACHE_KEY, [p.to_api() for p in roster.patients])
        self._cache.set(APPOINTMENTS_CACHE_KEY, [a.to_api() for a in roster.appointments])
        return roster

    def create_patient(self, payload: dict) -> Patient:
        row = self._api.post_json("/api/patients", payload)
        if not isinstance(row, dict) or "id" not in row:
            raise CollaboratorUnavailableError("Patient API did not return the created patient")
        return Patient.from_api({**payload, **row})

    def soft_delete(self, patient_id: str) -> None:
        self._api.delete(f"/api/patients/{patient_id}")
