from __future__ import annotations

import json

import pytest

from src.clinic_admin.clinic_admin.storage.mysql_kv_store import MySQLKeyValueStore


class FakeCursor:
    def __init__(self, table: dict):
        self.table = table
        self._row = None

    def execute(self, sql: str, params: tuple) -> None:
        if sql.strip().startswith("SELECT"):
            value = self.table.get(params[0])
            self._row = None if value is None else {"v": value}
        elif "INSERT INTO kv_store" in sql:
            if params[0] == "boom":
                raise RuntimeError("write failed")
            self.table[params[0]] = params[1]

    def fetchone(self):
        return self._row

    def close(self) -> None:
        pass


class FakeConnection:
    def __init__(self, table: dict, log: list):
        self.table = table
        self.log = log

    def cursor(self, dictionary: bool = False):
        return FakeCursor(self.table)

    def commit(self):
        self.log.append("commit")

    def rollback(self):
        self.log.append("rollback")

    def close(self):
        self.log.append("close")


class FakeConnectionFactory:
    def __init__(self):
        self.table: dict = {}
        self.log: list = []

    def connect(self):
        return FakeConnection(self.table, self.log)


@pytest.fixture
def factory():
    return FakeConnectionFactory()


def test_set_then_get_round_trips_json(factory):
    store = MySQLKeyValueStore(factory)

    store.set("archiveSettings", {"enabled": True, "months": 6, "retentionDays": 730})

    assert json.loads(factory.table["archiveSettings"])["retentionDays"] == 730
    assert store.get("archiveSettings") == {"enabled": True, "months": 6, "retentionDays": 730}
    assert factory.log == ["commit", "close", "commit", "close"]


def test_missing_key_reads_as_none(factory):
    assert MySQLKeyValueStore(factory).get("patientArchives") is None


def test_bytes_column_is_decoded(factory):
    factory.table["patients"] = b'[{"id": "1"}]'

    assert MySQLKeyValueStore(factory).get("patients") == [{"id": "1"}]


def test_invalid_json_is_ignored(factory, caplog):
    factory.table["patients"] = "{not json"

    assert MySQLKeyValueStore(factory).get("patients") is None
    assert "not valid JSON" in caplog.text


def test_failed_write_rolls_back(factory):
    with pytest.raises(RuntimeError):
        MySQLKeyValueStore(factory).set("boom", {})

    assert factory.log == ["rollback", "close"]
