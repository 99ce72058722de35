"""
Schedfy API client
Thin async wrapper around httpx used by every domain repository
"""
import logging
from typing import Any, Optional

import httpx

from .config import SCHEDFY_API_BASE_URL, SCHEDFY_API_TIMEOUT, SCHEDFY_API_TOKEN

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An error occurred"


class ApiError(Exception):
    """Raised for any non-2xx response or transport failure.

    status_code is 0 when the request never got a response.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error: Optional[str] = None,
        errors: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error
        self.errors = errors or {}

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"


def _decode_body(response: httpx.Response) -> Any:
    """Decode JSON bodies, fall back to text"""
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Response declared JSON but could not be decoded: {response.url}")
            return response.text
    return response.text


def _error_from_response(response: httpx.Response, body: Any) -> ApiError:
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or DEFAULT_ERROR_MESSAGE
        return ApiError(
            message=str(message),
            status_code=response.status_code,
            error=body.get("error"),
            errors=body.get("errors"),
        )
    message = body.strip() if isinstance(body, str) and body.strip() else DEFAULT_ERROR_MESSAGE
    return ApiError(message=message, status_code=response.status_code)


class ApiClient:
    """Async client for the Schedfy REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url if base_url is not None else SCHEDFY_API_BASE_URL).rstrip("/")
        self.token = token if token is not None else SCHEDFY_API_TOKEN
        self.timeout = timeout or SCHEDFY_API_TIMEOUT
        # A caller-supplied client (shared pool, MockTransport) is not ours to close
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.timeout)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Send a request and return the response payload.

        A {"data": ...} envelope is unwrapped; any other JSON body is
        returned as-is. Empty bodies return None.

        Raises:
            ApiError: non-2xx status or transport failure
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self.client.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed before a response: {e}")
            raise ApiError(
                message=str(e) or "Network error occurred",
                status_code=0,
                error="NetworkError",
            ) from e

        body = _decode_body(response)

        if not response.is_success:
            error = _error_from_response(response, body)
            logger.error(f"❌ {method} {path} returned {response.status_code}: {error.message}")
            raise error

        if isinstance(body, dict) and body.get("data") is not None:
            return body["data"]
        return body

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
