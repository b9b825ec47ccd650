from __future__ import annotations

from datetime import datetime, timezone

from src.clinic_admin.clinic_admin.archive.kv_archive_repository import KeyValueArchiveRepository
from src.clinic_admin.clinic_admin.archive.model import ArchiveEntry, ArchiveSettings
from src.clinic_admin.clinic_admin.core.enums import EntityType


def test_store_is_saved_under_camel_case_keys(archive_repo, kv):
    t = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    entry = ArchiveEntry(archived_at=t, name="Ana", reason="Manually deleted by user", expiry_date=t)

    archive_repo.save_store(EntityType.EMPLOYEE, {"7": [entry], "8": []})

    doc = kv.get("employeeArchives")
    assert list(doc) == ["7"]
    assert set(doc["7"][0]) == {"archivedAt", "expiryDate", "name", "reason"}
    assert archive_repo.load_store(EntityType.EMPLOYEE) == {"7": [entry]}


def test_legacy_entries_without_expiry_load(kv):
    kv.set("patientArchives", {"3": [{"archivedAt": "2020-05-01T10:00:00Z", "name": "Old", "reason": "legacy"}]})

    [entry] = KeyValueArchiveRepository(kv).load_store(EntityType.PATIENT)["3"]

    assert entry.expiry_date is None
    assert entry.archived_at == datetime(2020, 5, 1, 10, 0, tzinfo=timezone.utc)


def test_malformed_entries_are_skipped(kv, caplog):
    kv.set(
        "patientArchives",
        {
            "1": [{"name": "no timestamp"}, {"archivedAt": "2024-01-01", "name": "ok", "reason": "r"}],
            "2": [{"archivedAt": "not a date"}],
        },
    )

    store = KeyValueArchiveRepository(kv).load_store(EntityType.PATIENT)

    assert list(store) == ["1"]
    assert store["1"][0].name == "ok"
    assert "Skipping malformed archive entry" in caplog.text


def test_non_object_document_loads_as_empty(kv):
    kv.set("patientArchives", ["garbage"])

    assert KeyValueArchiveRepository(kv).load_store(EntityType.PATIENT) == {}


def test_settings_tolerate_partial_and_invalid_documents(kv, archive_repo):
    kv.set("archiveSettings", {"months": "twelve", "retentionDays": 45})
    assert archive_repo.load_settings(EntityType.PATIENT) == ArchiveSettings(enabled=True, months=6, retention_days=45)

    kv.set("archiveSettings", {"enabled": False})
    assert archive_repo.load_settings(EntityType.PATIENT).enabled is False

    kv.set("archiveSettings", {"enabled": 0})
    assert archive_repo.load_settings(EntityType.PATIENT).enabled is True


def test_non_object_items_and_non_list_values_are_skipped(kv, caplog):
    kv.set(
        "patientArchives",
        {
            "1": ["oops", 42, None, {"archivedAt": "2024-01-01", "name": "ok", "reason": "r"}],
            "2": "not a list",
            "3": {"archivedAt": "2024-01-01"},
        },
    )

    store = KeyValueArchiveRepository(kv).load_store(EntityType.PATIENT)

    assert list(store) == ["1"]
    assert [e.name for e in store["1"]] == ["ok"]
    assert "Skipping malformed archive list" in caplog.text
