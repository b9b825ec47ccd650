from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .archive.kv_archive_repository import KeyValueArchiveRepository
from .archive.repository import ArchiveRepository
from .archive.service import ArchiveService
from .clients.api_client import ClinicApiClient
from .core.constants import DEFAULT_API_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .employees.api_employee_directory import ApiEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .employees.service import EmployeeService
from .patients.api_patient_directory import ApiPatientDirectory
from .patients.repository import PatientDirectory
from .patients.service import PatientService
from .storage.mysql_kv_store import MySQLKeyValueStore
from .storage.repository import KeyValueStore


@dataclass(frozen=True)
class Container:
    kv_store: KeyValueStore
    archive_repo: ArchiveRepository
    patient_directory: PatientDirectory
    employee_directory: EmployeeDirectory

    archive_service: ArchiveService
    patient_service: PatientService
    employee_service: EmployeeService

    conn: Optional[DatabaseConnection] = None
    api_client: Optional[ClinicApiClient] = None


def wire_services(
    *,
    kv_store: KeyValueStore,
    patient_directory: PatientDirectory,
    employee_directory: EmployeeDirectory,
    conn: Optional[DatabaseConnection] = None,
    api_client: Optional[ClinicApiClient] = None,
) -> Container:
    archive_repo = KeyValueArchiveRepository(kv_store)
    archive_service = ArchiveService(archive_repo)

    return Container(
        kv_store=kv_store,
        archive_repo=archive_repo,
        patient_directory=patient_directory,
        employee_directory=employee_directory,
        archive_service=archive_service,
        patient_service=PatientService(patient_directory, archive_service),
        employee_service=EmployeeService(employee_directory, archive_service),
        conn=conn,
        api_client=api_client,
    )


def build_container(
    *,
    db_config: dict,
    api_base_url: str,
    api_timeout: float = DEFAULT_API_TIMEOUT_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    kv_store = MySQLKeyValueStore(conn)
    api_client = ClinicApiClient(api_base_url, timeout=api_timeout)

    return wire_services(
        kv_store=kv_store,
        patient_directory=ApiPatientDirectory(api_client, kv_store),
        employee_directory=ApiEmployeeDirectory(api_client, kv_store),
        conn=conn,
        api_client=api_client,
    )
