"""HTTP client for the remote user REST resource."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import httpx

logger = logging.getLogger("usermanager.remote")

JSON_HEADERS = {"Content-Type": "application/json; charset=UTF-8"}


class RemoteAPIError(RuntimeError):
    """Raised when a call to the remote user API does not succeed."""

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


@dataclass
class _ClientConfig:
    base_url: str
    timeout: float


def _normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip()
    if not cleaned:
        raise ValueError("API base URL must not be empty")
    return cleaned.rstrip("/")


def _extract_error_message(payload: object, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return default


class RemoteUserAPI:
    """List, create, update and delete users against a REST collection URL.

    ``base_url`` is the collection itself (for example
    ``https://jsonplaceholder.typicode.com/users``); item URLs are formed by
    appending ``/{id}``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = _ClientConfig(base_url=_normalize_base_url(base_url), timeout=timeout)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _item_url(self, user_id: int) -> str:
        return f"{self._config.base_url}/{user_id}"

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        payload: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                url,
                json=dict(payload) if payload is not None else None,
                headers=JSON_HEADERS,
            )
        except httpx.RequestError as exc:
            raise RemoteAPIError(
                operation, f"Failed to contact user API: {exc}"
            ) from exc

        if not response.is_success:
            message = f"User API request failed with status {response.status_code}"
            try:
                parsed = response.json()
            except ValueError:
                parsed = None
            message = _extract_error_message(parsed, message)
            raise RemoteAPIError(operation, message, status_code=response.status_code)

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    @staticmethod
    def _decode(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteAPIError(
                operation,
                "User API returned an invalid response",
                status_code=response.status_code,
            ) from exc

    def _decode_object(self, operation: str, response: httpx.Response) -> Dict[str, Any]:
        data = self._decode(operation, response)
        if not isinstance(data, dict):
            raise RemoteAPIError(
                operation,
                "User API returned an unexpected response payload",
                status_code=response.status_code,
            )
        return data

    async def list_users(self) -> List[Dict[str, Any]]:
        response = await self._request("fetch", "GET", self._config.base_url)
        data = self._decode("fetch", response)
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise RemoteAPIError(
                "fetch",
                "User API returned an unexpected list payload",
                status_code=response.status_code,
            )
        return data

    async def create_user(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        response = await self._request("create", "POST", self._config.base_url, payload=payload)
        return self._decode_object("create", response)

    async def update_user(self, user_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = {"id": user_id, **payload}
        response = await self._request("update", "PUT", self._item_url(user_id), payload=body)
        return self._decode_object("update", response)

    async def delete_user(self, user_id: int) -> None:
        await self._request("delete", "DELETE", self._item_url(user_id))


__all__ = ["JSON_HEADERS", "RemoteAPIError", "RemoteUserAPI"]
