"""HTTP client wrapper for AO compute and messenger units.

Handles connection pooling, error mapping, and request/response serialization.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Any

import httpx

from ao_mcp.connect.errors import (
    RequestTimeoutError,
    UnitUnavailableError,
    raise_for_error_response,
)

logger = logging.getLogger("ao_mcp.connect")


class HTTPClient:
    """Async HTTP client for a single AO unit.

    Wraps httpx.AsyncClient with:
    - Connection pooling
    - Automatic error response mapping to AOError
    - Retries for idempotent reads
    - Request/response logging
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Unit base URL (e.g., "https://cu.ao-testnet.xyz")
            timeout: Default request timeout in seconds
            max_retries: Maximum retry attempts for transient errors on reads
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: httpx.AsyncClient | None = None

    @staticmethod
    def _is_retryable_method(method: str) -> bool:
        # Dry-runs and submissions are POSTs and never retried.
        return method.upper() == "GET"

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return status_code == 429 or 500 <= status_code <= 599

    @staticmethod
    def _retry_delay_seconds(attempt: int) -> float:
        # attempt is zero-based retry attempt index
        return min(0.2 * (2**attempt), 1.5)

    @staticmethod
    def _parse_json_or_error_payload(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
            if isinstance(payload, dict):
                return payload
            return {"data": payload}
        except ValueError:
            if response.status_code >= 400:
                raw_text = response.text or ""
                snippet_limit = 500
                snippet = raw_text[:snippet_limit]
                return {
                    "error": {
                        "message": f"HTTP {response.status_code} returned non-JSON error response",
                        "details": {
                            "raw_response_snippet": snippet,
                            "raw_response_truncated": len(raw_text) > snippet_limit,
                        },
                    }
                }
            return {}

    async def __aenter__(self) -> HTTPClient:
        """Enter async context, creating HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers={"Accept": "application/json"},
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context, closing HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("HTTPClient not initialized. Use 'async with' context.")
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        content: bytes | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Make an HTTP request to the unit.

        Args:
            method: HTTP method (GET, POST)
            path: API path (e.g., "/dry-run")
            json: Request body as dict (will be serialized)
            content: Raw request body (e.g., a signed data item)
            params: Query parameters
            headers: Extra request headers
            timeout: Override default timeout for this request

        Returns:
            Parsed JSON response body

        Raises:
            AOError: On unit error responses, timeouts, or connection failures
        """
        request_headers: dict[str, str] = dict(headers or {})
        if json is not None:
            request_headers["Content-Type"] = "application/json"

        # Filter None values from params
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("Request: %s %s", method, path)

        retryable_method = self._is_retryable_method(method)
        max_attempts = self._max_retries + 1 if retryable_method else 1

        for attempt in range(max_attempts):
            try:
                response = await self.client.request(
                    method,
                    path,
                    json=json,
                    content=content,
                    params=params,
                    headers=request_headers if request_headers else None,
                    timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
                )
            except httpx.TimeoutException as exc:
                if retryable_method and attempt < max_attempts - 1:
                    await asyncio.sleep(self._retry_delay_seconds(attempt))
                    continue
                raise RequestTimeoutError(
                    f"{method} {path} timed out", details={"base_url": self._base_url}
                ) from exc
            except httpx.TransportError as exc:
                if retryable_method and attempt < max_attempts - 1:
                    await asyncio.sleep(self._retry_delay_seconds(attempt))
                    continue
                raise UnitUnavailableError(
                    f"{method} {path} failed: {exc!s}",
                    details={"base_url": self._base_url},
                ) from exc

            logger.debug("Response: %s %s", response.status_code, path)

            # Retry on transient HTTP status for retryable methods.
            if (
                retryable_method
                and attempt < max_attempts - 1
                and self._is_retryable_status(response.status_code)
            ):
                await asyncio.sleep(self._retry_delay_seconds(attempt))
                continue

            body = self._parse_json_or_error_payload(response)
            if response.status_code >= 400:
                raise_for_error_response(response.status_code, body)
            return body

        raise RuntimeError("HTTP request attempt loop exhausted unexpectedly")

    async def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Make a GET request."""
        return await self.request("GET", path, params=params, timeout=timeout)

    async def post(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Make a JSON POST request."""
        return await self.request(
            "POST", path, json=json, params=params, timeout=timeout
        )

    async def post_bytes(
        self,
        path: str,
        *,
        content: bytes,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """POST a binary body such as a signed ANS-104 data item.

        Args:
            path: API path
            content: Raw body bytes
            timeout: Override default timeout

        Returns:
            Parsed JSON response
        """
        return await self.request(
            "POST",
            path,
            content=content,
            headers={"Content-Type": "application/octet-stream"},
            timeout=timeout,
        )
