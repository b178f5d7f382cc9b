import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class ApiResult:
    """Outcome of one HTTP exchange. Non-2xx statuses are values, not exceptions."""
    ok: bool
    status_code: Optional[int] = None
    reason: str = ""
    payload: Any = None
    has_body: bool = False
    body_parsed: bool = False
    error: Optional[str] = None

    @property
    def transport_failed(self) -> bool:
        return self.status_code is None

    def server_message(self) -> Optional[str]:
        """Return the ``message`` or ``error`` field of a JSON error body, if any."""
        if not isinstance(self.payload, dict):
            return None
        for key in ("message", "error"):
            value = self.payload.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiResult":
        result = cls(
            ok=response.is_success,
            status_code=response.status_code,
            reason=response.reason_phrase,
        )
        if response.headers.get("content-length") == "0" or not response.content:
            return result

        result.has_body = True
        try:
            result.payload = response.json()
            result.body_parsed = True
        except ValueError:
            logger.debug(f"Response body from {response.request.url} is not JSON")
        return result

    @classmethod
    def transport_failure(cls, error: str) -> "ApiResult":
        return cls(ok=False, error=error)


class BooksHTTPClient:
    """Async HTTP client with connection pooling for the books REST service.

    No timeout is applied: a request that never resolves stays pending, and
    nothing is retried automatically.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        limits = httpx.Limits(
            max_keepalive_connections=20,
            max_connections=100,
            keepalive_expiry=30.0
        )

        self._client = httpx.AsyncClient(
            limits=limits,
            timeout=None,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def request(self, method: str, url: str, **kwargs) -> ApiResult:
        """Send a request and wrap the response (or transport failure) in an ApiResult."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            error = str(e) or e.__class__.__name__
            logger.error(f"{method} {url} failed: {error}")
            return ApiResult.transport_failure(error)

        if response.is_success:
            logger.info(f"{method} {url} -> {response.status_code}")
        else:
            logger.warning(f"{method} {url} -> {response.status_code} {response.reason_phrase}")
        return ApiResult.from_response(response)

    async def get(self, url: str, **kwargs) -> ApiResult:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> ApiResult:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> ApiResult:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> ApiResult:
        return await self.request("DELETE", url, **kwargs)

    async def close(self):
        """Close the underlying HTTP client"""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
