"""Async HTTP client for the property-management backend."""

import logging
import secrets
import time
from typing import Any, Optional

import httpx

from rentdesk.core.exceptions import ApiError, ApiConnectionError, InvalidResponseError
from rentdesk.providers.api_client import EnvelopeBody
from rentdesk.providers.token_store import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0

# Friendly messages for statuses the dashboard reports verbatim
STATUS_MESSAGES = {
    401: "Session expired. Please login again.",
    403: "Access denied. You do not have permission to perform this action.",
    404: "Resource not found.",
    409: "Conflict. The resource already exists or is in use.",
    422: "Validation error. Please check your input.",
    429: "Too many requests. Please wait a moment and try again.",
    500: "Server error. Please try again later.",
    503: "Service temporarily unavailable. Please try again later.",
}


def _request_id() -> str:
    return f"req_{int(time.time() * 1000)}_{secrets.token_hex(5)}"


class HttpPropertyApiClient:
    """
    PropertyApiClient over httpx.

    Adds the bearer token from the token store to every request. A 401 clears
    the stored token so pollers go quiet until the next login.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token_store = token_store
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            follow_redirects=True,
            transport=transport,
        )

    async def list_properties(self) -> EnvelopeBody:
        return await self._get("/properties")

    async def list_tenants(self) -> EnvelopeBody:
        return await self._get("/tenants")

    async def list_bills(self, filters: Optional[dict[str, Any]] = None) -> EnvelopeBody:
        params = {k: v for k, v in (filters or {}).items() if v is not None}
        return await self._get("/bills", params=params)

    async def get_bills_stats(self) -> EnvelopeBody:
        return await self._get("/bills/stats")

    async def list_expenses(self) -> EnvelopeBody:
        return await self._get("/expenses")

    async def get_property_photos(self, property_id: Any) -> EnvelopeBody:
        return await self._get(f"/properties/{property_id}/photos")

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"X-Request-ID": _request_id()}
        token = self._token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> EnvelopeBody:
        started = time.monotonic()
        try:
            response = await self._client.get(path, params=params, headers=self._headers())
        except httpx.TimeoutException as exc:
            logger.error("GET %s timed out", path)
            raise ApiConnectionError("Request timeout. Please try again.") from exc
        except httpx.TransportError as exc:
            logger.error("GET %s failed: %s", path, exc)
            raise ApiConnectionError("Network error. Please check your connection.") from exc

        logger.debug(
            "GET %s -> %s in %dms",
            path,
            response.status_code,
            (time.monotonic() - started) * 1000,
        )

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                raise InvalidResponseError() from exc

        raise self._api_error(response)

    def _api_error(self, response: httpx.Response) -> ApiError:
        status = response.status_code
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if status == 401:
            logger.info("Authentication expired, clearing stored token")
            self._token_store.clear()

        message = STATUS_MESSAGES.get(status) or payload.get("error") or "An unexpected error occurred"
        return ApiError(message, status_code=status, payload=payload)
