"""HTTP client for the salesdesk backend."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import structlog

from salesdesk.adapters.http import endpoints
from salesdesk.adapters.http.csrf import CsrfTokenProvider
from salesdesk.core.exceptions import ApiError, ApiErrorCode

logger = structlog.get_logger()

PROTECTED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"


class ApiClient:
    """Cookie-session JSON client.

    Handles three cross-cutting concerns for every request:
    1. Sends the CSRF token on state-changing methods
    2. On a 401, refreshes the session once and retries the request;
       concurrent 401s share a single refresh call
    3. Converts every failure into ApiError
    """

    def __init__(
        self,
        base_url: str,
        csrf: CsrfTokenProvider,
        timeout_seconds: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. https://api.example.com/api/v1.
            csrf: Token provider for state-changing requests.
            timeout_seconds: Per-request timeout.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self._csrf = csrf
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )
        self._refreshing: asyncio.Task[None] | None = None
        self.session_expired_handler: Callable[[], Awaitable[None]] | None = None

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET a JSON resource."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> dict[str, Any]:
        """POST a JSON body."""
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> dict[str, Any]:
        """PUT a JSON body."""
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> dict[str, Any]:
        """DELETE a resource."""
        return await self.request("DELETE", path)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        retried: bool = False,
    ) -> dict[str, Any]:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            json: Request body.
            params: Query parameters.
            retried: True when replaying after a session refresh.

        Returns:
            Decoded response body ({} for empty bodies).

        Raises:
            ApiError: On transport failure or a non-2xx response.
        """
        method = method.upper()
        headers: dict[str, str] = {}
        token = self._csrf.get()
        if method in PROTECTED_METHODS and token:
            headers["x-csrf-token"] = token

        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            raise ApiError("Request timed out", status=0, code=ApiErrorCode.TIMEOUT) from e
        except httpx.RequestError as e:
            raise ApiError(
                f"Network error: {e}", status=0, code=ApiErrorCode.NETWORK_ERROR
            ) from e

        if response.status_code == 401 and not retried and not _skips_refresh(path):
            try:
                await self._refresh_session()
            except ApiError:
                raise _error_from_response(response) from None
            return await self.request(method, path, json=json, params=params, retried=True)

        if response.is_error:
            raise _error_from_response(response)

        return _decode(response)

    async def ensure_csrf_token(self) -> str:
        """Fetch a CSRF token unless one is already held."""
        token = self._csrf.get()
        if token:
            return token

        data = await self.get(endpoints.CSRF_TOKEN)
        token = data.get("csrfToken")
        if not token:
            raise ApiError("Server did not return a CSRF token", status=500)
        self._csrf.set(token)
        return token

    async def _refresh_session(self) -> None:
        if self._refreshing is None:
            self._refreshing = asyncio.ensure_future(self._do_refresh())
        await asyncio.shield(self._refreshing)

    async def _do_refresh(self) -> None:
        try:
            await self.request("POST", endpoints.AUTH_REFRESH, json={}, retried=True)
            logger.debug("session_refreshed")
        except ApiError as e:
            logger.info("session_refresh_failed", status=e.status)
            if self.session_expired_handler is not None:
                await self.session_expired_handler()
            raise
        finally:
            self._refreshing = None

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()


def _skips_refresh(path: str) -> bool:
    return any(skip in path for skip in endpoints.SKIP_REFRESH_PATHS)


def _decode(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"data": data}


def _error_from_response(response: httpx.Response) -> ApiError:
    data = _decode(response)
    message = data.get("message") or response.reason_phrase or DEFAULT_ERROR_MESSAGE
    return ApiError(message, status=response.status_code, data=data or None)
