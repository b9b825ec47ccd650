from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from src.clinic_admin.clinic_admin.common.datetime_utils import parse_timestamp, to_iso


def test_parse_timestamp_variants():
    assert parse_timestamp("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp("2024-05-01") == datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert parse_timestamp(date(2024, 5, 1)) == datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-05-01T12:00:00+02:00") == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)


def test_to_iso_reads_naive_values_as_utc():
    naive = datetime(2024, 5, 1, 10, 0)

    assert to_iso(naive) == "2024-05-01T10:00:00+00:00"
    assert parse_timestamp(to_iso(naive)) == parse_timestamp(naive)


def test_to_iso_converts_other_offsets_to_utc():
    value = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    assert to_iso(value) == "2024-05-01T10:00:00+00:00"
