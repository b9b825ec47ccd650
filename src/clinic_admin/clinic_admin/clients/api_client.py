"""Thin HTTP client for the clinic REST backend (``/api/...``).

The backend is an external collaborator: every transport failure or non-2xx
answer surfaces as :class:`CollaboratorUnavailableError` so callers can fall
back to their local cache.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS
from ..core.exceptions import CollaboratorUnavailableError


class ClinicApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_API_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def get_json(self, path: str, *, params: Optional[dict] = None) -> Any:
        return self._request("GET", path, params=params)

    def post_json(self, path: str, payload: Optional[dict] = None) -> Any:
        return self._request("POST", path, json=payload or {})

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise CollaboratorUnavailableError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            raise CollaboratorUnavailableError(f"{method} {path} failed: {self._error_message(response)}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorUnavailableError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.reason_phrase or f"HTTP {response.status_code}"
        if isinstance(data, dict):
            return str(data.get("error") or data.get("message") or f"HTTP {response.status_code}")
        return f"HTTP {response.status_code}"
