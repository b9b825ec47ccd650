from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.clinic_admin.clinic_admin.archive.model import ArchiveEntry, ArchiveSettings
from src.clinic_admin.clinic_admin.archive.service import ArchiveService
from src.clinic_admin.clinic_admin.core.enums import EntityType
from src.clinic_admin.clinic_admin.core.exceptions import NotFoundError, ValidationError
from src.clinic_admin.clinic_admin.patients.model import Appointment, Patient, PatientRoster

PATIENT = EntityType.PATIENT


def _roster(*patients: Patient, appointments=()) -> PatientRoster:
    return PatientRoster(patients=list(patients), appointments=list(appointments))


def test_settings_default_when_nothing_stored(archive_service):
    assert archive_service.get_settings(PATIENT) == ArchiveSettings(enabled=True, months=6, retention_days=730)


def test_save_settings_persists(archive_service, kv):
    archive_service.save_settings(PATIENT, enabled=False, months="3", retention_days="30")

    assert archive_service.get_settings(PATIENT) == ArchiveSettings(enabled=False, months=3, retention_days=30)
    assert kv.get("archiveSettings") == {"enabled": False, "months": 3, "retentionDays": 30}


@pytest.mark.parametrize(
    "months, retention_days",
    [("6", "0"), ("6", "-5"), ("-1", "30"), ("6", "abc"), ("x", "30")],
)
def test_save_settings_rejects_invalid_values_without_touching_stored(archive_service, months, retention_days):
    archive_service.save_settings(PATIENT, enabled=True, months=4, retention_days=90)

    with pytest.raises(ValidationError):
        archive_service.save_settings(PATIENT, enabled=False, months=months, retention_days=retention_days)

    assert archive_service.get_settings(PATIENT) == ArchiveSettings(enabled=True, months=4, retention_days=90)


def test_retention_zero_message(archive_service):
    with pytest.raises(ValidationError, match="Retention period must be at least 1 day"):
        archive_service.save_settings(PATIENT, enabled=True, months=6, retention_days=0)


def test_settings_are_independent_per_entity_type(archive_service):
    archive_service.save_settings(EntityType.EMPLOYEE, enabled=True, months=1, retention_days=10)

    assert archive_service.get_settings(PATIENT).retention_days == 730
    assert archive_service.get_settings(EntityType.EMPLOYEE).retention_days == 10


def test_manual_archive_uses_retention_and_always_appends(archive_service, fixed_now):
    archive_service.save_settings(PATIENT, enabled=True, months=6, retention_days=30)

    first = archive_service.archive(PATIENT, "5", name="Ana", reason="Manually deleted by user", now=fixed_now)
    archive_service.archive(PATIENT, "5", name="Ana", reason="Manually deleted by user", now=fixed_now)

    assert first.expiry_date == fixed_now + timedelta(days=30)
    assert len(archive_service.entries(PATIENT, "5")) == 2
    assert archive_service.is_archived(PATIENT, "5")
    assert archive_service.archived_ids(PATIENT) == {"5"}


def test_archive_then_purge_scenario(archive_service, kv):
    archive_service.archive(
        PATIENT, "99", name="Jane Doe", reason="Manually deleted by user",
        now=datetime(2023, 1, 1, tzinfo=timezone.utc),
    )

    assert archive_service.purge_expired(PATIENT, now=datetime(2024, 6, 1, tzinfo=timezone.utc)) == 0
    assert archive_service.is_archived(PATIENT, "99")

    assert archive_service.purge_expired(PATIENT, now=datetime(2025, 2, 1, tzinfo=timezone.utc)) == 1
    assert not archive_service.is_archived(PATIENT, "99")
    assert kv.get("patientArchives") == {}


def test_purge_without_expired_entries_does_not_write(archive_service, kv, fixed_now):
    archive_service.archive(PATIENT, "1", name="A", reason="r", now=fixed_now)
    writes = kv.writes

    assert archive_service.purge_expired(PATIENT, now=fixed_now) == 0
    assert kv.writes == writes


def test_archive_eligible_archives_inactive_patients(archive_service, fixed_now):
    roster = _roster(
        Patient(patient_id="1", name="Never Seen", status="inactive"),
        Patient(patient_id="2", name="Still Active", status="active"),
        Patient(patient_id="3", name="Recent Visit", status="inactive"),
        appointments=[Appointment(appointment_id="a", patient_id="3", date=fixed_now - timedelta(days=10))],
    )

    archived = archive_service.archive_eligible(PATIENT, roster, now=fixed_now)

    assert archived == ["1"]
    [entry] = archive_service.entries(PATIENT, "1")
    assert entry.name == "Never Seen"
    assert entry.reason == "Automatic archive - inactive patient"


def test_archive_eligible_skips_entities_with_unexpired_entry(archive_service, fixed_now):
    archive_service.save_settings(PATIENT, enabled=True, months=6, retention_days=30)
    roster = _roster(Patient(patient_id="1", name="Dormant", status="inactive"))

    assert archive_service.archive_eligible(PATIENT, roster, now=fixed_now) == ["1"]
    assert archive_service.archive_eligible(PATIENT, roster, now=fixed_now + timedelta(days=1)) == []
    assert len(archive_service.entries(PATIENT, "1")) == 1

    # once the previous snapshot has expired a fresh one is taken
    assert archive_service.archive_eligible(PATIENT, roster, now=fixed_now + timedelta(days=31)) == ["1"]
    assert len(archive_service.entries(PATIENT, "1")) == 2


def test_archive_eligible_does_nothing_when_disabled(archive_service, kv, fixed_now):
    archive_service.save_settings(PATIENT, enabled=False, months=0, retention_days=30)
    writes = kv.writes
    roster = _roster(Patient(patient_id="1", name="Dormant", status="inactive"))

    assert archive_service.archive_eligible(PATIENT, roster, now=fixed_now) == []
    assert kv.writes == writes


def test_eligibility_overview(archive_service, fixed_now):
    last = datetime(2023, 1, 1, tzinfo=timezone.utc)
    roster = _roster(
        Patient(patient_id="1", name="Old", status="inactive"),
        Patient(patient_id="2", name="Current", status="active"),
        appointments=[Appointment(appointment_id="a", patient_id="1", date=last)],
    )
    archive_service.archive(PATIENT, "1", name="Old", reason="r", now=fixed_now)

    rows = {r.entity_id: r for r in archive_service.eligibility_overview(PATIENT, roster, now=fixed_now)}

    assert rows["1"].eligible and rows["1"].last_activity == last and rows["1"].archive_count == 1
    assert not rows["2"].eligible and rows["2"].last_activity is None and rows["2"].archive_count == 0


def test_browse_flags_expired_entries_and_prefers_live_name(archive_service, fixed_now):
    archive_service.save_settings(PATIENT, enabled=True, months=6, retention_days=10)
    archive_service.archive(PATIENT, "1", name="Old Name", reason="r", now=fixed_now - timedelta(days=20))
    archive_service.archive(PATIENT, "2", name="Gone", reason="r", now=fixed_now)
    roster = _roster(Patient(patient_id="1", name="New Name", status="inactive"))

    browser = archive_service.browse(PATIENT, roster=roster, now=fixed_now)
    views = {v.entity_id: v for v in browser.entities}

    assert browser.has_expired
    assert views["1"].name == "New Name"
    assert views["1"].entries[0].expired
    assert views["1"].entries[0].entry.name == "Old Name"
    assert views["2"].name == "Gone"
    assert not views["2"].entries[0].expired


def test_browse_without_expired_entries(archive_service, fixed_now):
    archive_service.archive(PATIENT, "1", name="A", reason="r", now=fixed_now)

    assert not archive_service.browse(PATIENT, now=fixed_now).has_expired


def test_delete_first_of_two_entries(archive_service, fixed_now):
    archive_service.archive(PATIENT, "42", name="first", reason="r", now=fixed_now)
    archive_service.archive(PATIENT, "42", name="second", reason="r", now=fixed_now + timedelta(hours=1))

    archive_service.delete_entry(PATIENT, "42", 0)

    [remaining] = archive_service.entries(PATIENT, "42")
    assert remaining.name == "second"
    assert archive_service.get_entry(PATIENT, "42", 0) == remaining


def test_delete_or_get_missing_entry_raises(archive_service, fixed_now):
    archive_service.archive(PATIENT, "42", name="A", reason="r", now=fixed_now)

    with pytest.raises(NotFoundError):
        archive_service.delete_entry(PATIENT, "42", 3)
    with pytest.raises(NotFoundError):
        archive_service.get_entry(PATIENT, "7", 0)
    assert len(archive_service.entries(PATIENT, "42")) == 1


class ExplodingRepository:
    def load_store(self, entity_type):
        raise RuntimeError("storage unavailable")

    def save_store(self, entity_type, store):
        raise AssertionError("should not be reached")

    def load_settings(self, entity_type):
        return ArchiveSettings()

    def save_settings(self, entity_type, settings):
        raise AssertionError("should not be reached")


def test_silent_purge_logs_and_reports_zero(caplog):
    service = ArchiveService(ExplodingRepository())

    with caplog.at_level("ERROR"):
        assert service.purge_all_silently() == {EntityType.PATIENT: 0, EntityType.EMPLOYEE: 0}
    assert "Automatic purge of patient archives failed" in caplog.text


def test_manual_purge_propagates_errors():
    service = ArchiveService(ExplodingRepository())

    with pytest.raises(RuntimeError):
        service.purge_expired(PATIENT)


def test_silent_purge_removes_expired(archive_service):
    archive_service.save_settings(PATIENT, enabled=True, months=6, retention_days=1)
    archive_service.archive(PATIENT, "1", name="A", reason="r", now=datetime(2024, 1, 1, tzinfo=timezone.utc))
    archive_service.archive(EntityType.EMPLOYEE, "e1", name="B", reason="r", now=datetime(2024, 1, 1, tzinfo=timezone.utc))

    purged = archive_service.purge_all_silently(now=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert purged == {EntityType.PATIENT: 1, EntityType.EMPLOYEE: 1}
    assert archive_service.entries(PATIENT, "1") == []


@pytest.mark.parametrize(
    "months, retention_days, message",
    [
        (30000, 30, "Inactivity window must be at most 1200 months"),
        (6, 3_000_000, "Retention period must be at most 36500 days"),
    ],
)
def test_save_settings_rejects_values_above_range(archive_service, months, retention_days, message):
    with pytest.raises(ValidationError, match=message):
        archive_service.save_settings(PATIENT, enabled=True, months=months, retention_days=retention_days)

    assert archive_service.get_settings(PATIENT) == ArchiveSettings()


def test_largest_allowed_settings_still_evaluate(archive_service, fixed_now):
    archive_service.save_settings(PATIENT, enabled=True, months=1200, retention_days=36500)
    roster = _roster(
        Patient(patient_id="1", name="Old", status="inactive"),
        appointments=[Appointment(appointment_id="a", patient_id="1", date=datetime(2020, 1, 1, tzinfo=timezone.utc))],
    )

    [row] = archive_service.eligibility_overview(PATIENT, roster, now=fixed_now)
    entry = archive_service.archive(PATIENT, "1", name="Old", reason="r", now=fixed_now)

    assert not row.eligible
    assert entry.expiry_date == fixed_now + timedelta(days=36500)


def test_out_of_range_stored_settings_fall_back_to_defaults(archive_service, kv, fixed_now):
    kv.set("archiveSettings", {"enabled": True, "months": 30000, "retentionDays": 3_000_000})
    roster = _roster(
        Patient(patient_id="1", name="Old", status="inactive"),
        appointments=[Appointment(appointment_id="a", patient_id="1", date=datetime(2020, 1, 1, tzinfo=timezone.utc))],
    )

    assert archive_service.get_settings(PATIENT) == ArchiveSettings()
    assert archive_service.archive_eligible(PATIENT, roster, now=fixed_now) == ["1"]


def test_naive_now_is_treated_as_utc(archive_service, kv):
    entry = archive_service.archive(PATIENT, "1", name="A", reason="r", now=datetime(2024, 1, 1, 8, 30))

    assert entry.archived_at == datetime(2024, 1, 1, 8, 30, tzinfo=timezone.utc)
    assert kv.get("patientArchives")["1"][0]["archivedAt"] == "2024-01-01T08:30:00+00:00"
    assert archive_service.entries(PATIENT, "1") == [entry]
