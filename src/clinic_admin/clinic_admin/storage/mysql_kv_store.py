from __future__ import annotations

import json
import logging
from typing import Any

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decode_json_column, fetchone
from .repository import KeyValueStore

logger = logging.getLogger(__name__)


class MySQLKeyValueStore(KeyValueStore):
    """JSON documents keyed by name in the ``kv_store`` table (upsert on write)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Any:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT v FROM kv_store WHERE k=%s", (key,))
            row = fetchone(cur)
        if not row:
            return None
        try:
            return decode_json_column(row["v"])
        except ValueError:
            logger.warning("kv_store value for %r is not valid JSON, ignoring it", key)
            return None

    def set(self, key: str, value: Any) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store(k, v) VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE v=VALUES(v)
                """,
                (key, json.dumps(value)),
            )
