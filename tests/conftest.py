from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from typing import Any

import pytest

from src.clinic_admin.clinic_admin.archive.kv_archive_repository import KeyValueArchiveRepository
from src.clinic_admin.clinic_admin.archive.service import ArchiveService


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore; values go through JSON like the MySQL table."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self.data: dict[str, str] = {k: json.dumps(v) for k, v in (initial or {}).items()}
        self.writes = 0

    def get(self, key: str) -> Any:
        raw = self.data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.writes += 1
        self.data[key] = json.dumps(copy.deepcopy(value))


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def archive_repo(kv) -> KeyValueArchiveRepository:
    return KeyValueArchiveRepository(kv)


@pytest.fixture
def archive_service(archive_repo) -> ArchiveService:
    return ArchiveService(archive_repo)
