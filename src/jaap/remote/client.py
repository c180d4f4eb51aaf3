"""HTTP client for the jaap backend service."""

import logging
from typing import Any

import httpx

from ..errors import RemoteAPIError

logger = logging.getLogger(__name__)


class RemoteClient:
    """Async client for the recitation backend.

    Each call opens a short-lived httpx.AsyncClient so the client holds no
    connection state between drains.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        api_prefix: str = "/api/v1",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize remote client.

        Args:
            base_url: Service root; the health check lives directly below it
            api_prefix: Prefix for resource endpoints
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        )

    async def _request(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise RemoteAPIError(f"{method} {path} failed: {e}", None, e) from e

        if response.is_error:
            raise RemoteAPIError(
                f"{method} {path} returned {response.status_code}",
                response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteAPIError(
                f"{method} {path} returned invalid JSON", response.status_code, e
            ) from e
        if not isinstance(body, dict):
            raise RemoteAPIError(
                f"{method} {path} returned unexpected body", response.status_code
            )
        return body

    async def health(self) -> bool:
        """Probe the backend.

        Returns:
            True if GET /health answered with a 2xx status, False otherwise
        """
        try:
            await self._request("GET", "/health")
        except RemoteAPIError as e:
            logger.debug(f"Health check failed: {e}")
            return False
        return True

    async def get_mantras(self) -> list[dict[str, Any]]:
        """Fetch the mantra collection.

        Raises:
            RemoteAPIError: If the request fails or the envelope is malformed
        """
        body = await self._request("GET", f"{self.api_prefix}/mantras")
        data = body.get("data")
        if not isinstance(data, list):
            raise RemoteAPIError("Mantra response has no data list")
        return data

    async def get_recitations(self) -> list[dict[str, Any]]:
        """Fetch recitations stored on the backend.

        Raises:
            RemoteAPIError: If the request fails or the envelope is malformed
        """
        body = await self._request("GET", f"{self.api_prefix}/recitations")
        data = body.get("data")
        if not isinstance(data, list):
            raise RemoteAPIError("Recitation response has no data list")
        return data

    async def create_recitation(self, payload: dict[str, Any]) -> str:
        """Store one recitation on the backend.

        Args:
            payload: {mantra_id, user_id, count, duration_minutes, notes?}

        Returns:
            Identifier assigned by the backend

        Raises:
            RemoteAPIError: If the backend rejects or cannot receive the write
        """
        body = await self._request("POST", f"{self.api_prefix}/recitations", json=payload)
        return str(body.get("id", ""))
