# ==============================================================================
# HTTP SERVICE CLIENT - Shared Plumbing for External Services
# ==============================================================================
# Lazily created httpx.AsyncClient with failure translation
# ==============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from order_desk.core.exceptions import DependencyFailureError
from order_desk.core.settings import settings

logger = logging.getLogger(__name__)


class HTTPServiceClient:
    """
    Base class for clients of external HTTP services.

    The underlying ``httpx.AsyncClient`` is created on first use and
    reused afterwards. Transport errors and unexpected status codes
    surface as ``DependencyFailureError``.

    Attributes:
        dependency: Name reported in DependencyFailureError details
    """

    dependency: str = "external service"

    def __init__(
        self,
        base_url: str = "",
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            base_url: Prefix for relative request URLs
            headers: Headers sent with every request
            timeout: Request timeout in seconds (defaults to settings)
            transport: Custom transport, e.g. ``httpx.MockTransport``
        """
        self._base_url = base_url
        self._headers = headers or {}
        self._timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._lock = asyncio.Lock()

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._base_url,
                    headers=self._headers,
                    timeout=self._timeout,
                    transport=self._transport,
                )
            return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _failure(
        self,
        operation: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> DependencyFailureError:
        logger.error(f"{self.dependency} {operation} failed: {message}")
        return DependencyFailureError(
            message=f"{self.dependency} {operation} failed: {message}",
            dependency=self.dependency,
            operation=operation,
            details=details,
        )

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send a request.

        Raises:
            DependencyFailureError: On transport errors
        """
        client = await self.get_client()
        try:
            return await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise self._failure(operation, str(e) or type(e).__name__) from e

    def _json(self, response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise self._failure(operation, "response is not valid JSON") from e
