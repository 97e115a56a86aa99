"""
HTTP client for the storefront API

Wraps `httpx.AsyncClient`: attaches the session's bearer token, decodes JSON
bodies and raises `ApiError` for non-2xx responses. A 401 clears the session.
Requests are never retried.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from gaia.client.config import client_settings
from gaia.client.session import SessionStore

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error - no response received"


class ApiError(Exception):
    """The API answered with an error status, or did not answer at all."""

    def __init__(self, status_code: Optional[int], message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


def _error_message(response: httpx.Response) -> tuple:
    try:
        payload = response.json()
    except ValueError:
        return f"Request failed with status {response.status_code}", {}
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"]), payload
    return f"Request failed with status {response.status_code}", payload if isinstance(payload, dict) else {}


class ApiClient:
    def __init__(
        self,
        session: Optional[SessionStore] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.session = session or SessionStore(client_settings.SESSION_FILE)
        self.base_url = (base_url or client_settings.API_URL).rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout or client_settings.REQUEST_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._http_client.is_closed:
            await self._http_client.aclose()

    def _headers(self) -> Dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._http_client.request(
                method, path, json=json, params=params, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {type(e).__name__}: {e}")
            raise ApiError(None, NETWORK_ERROR_MESSAGE) from e

        if response.is_success:
            if not response.content:
                return None
            return response.json()

        message, payload = _error_message(response)
        if response.status_code == 401:
            logger.info("Unauthorized response, clearing session")
            self.session.clear()
        elif response.status_code == 403:
            logger.warning(f"Permission denied for {method} {path}")
        elif response.status_code == 404:
            logger.info(f"Resource not found: {method} {path}")
        elif response.status_code >= 500:
            logger.error(f"Server error on {method} {path}: {message}")
        raise ApiError(response.status_code, message, payload)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Optional[Any] = None) -> Any:
        return await self.request("POST", path, json=data if data is not None else {})

    async def put(self, path: str, data: Optional[Any] = None) -> Any:
        return await self.request("PUT", path, json=data if data is not None else {})

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
