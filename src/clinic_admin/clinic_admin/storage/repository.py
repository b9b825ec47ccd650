from __future__ import annotations

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Persisted key -> JSON document store.

    Values are plain JSON-compatible structures (dict/list/str/number/bool/None).
    A missing key reads as ``None``.
    """

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError
