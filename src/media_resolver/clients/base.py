from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from media_resolver import __version__
from media_resolver.errors import ItemNotFound, UpstreamError

DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRIES = 2
USER_AGENT = f"media-resolver/{__version__}"

logger = logging.getLogger(__name__)


class CatalogClient:
    """Asynchronous JSON client for one upstream catalog API.

    Primary requests map HTTP failures onto the resolver error taxonomy and are
    retried on transport errors. Optional requests are attempted once and
    return ``None`` on any failure.
    """

    display_name = "Catalog"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        request_headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }
        if headers:
            request_headers.update(headers)

        self._retries = max(1, retries)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=request_headers,
            params=dict(params or {}),
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_primary(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        resource: str = "Resource",
    ) -> Any:
        """Fetch a required resource.

        Raises:
            ItemNotFound: upstream answered 404
            UpstreamError: any other non-success status, a timeout, a transport
                failure or a body that is not JSON
        """
        try:
            async for attempt in _retry_policy(self._retries):
                with attempt:
                    response = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"{self.display_name} API request timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{self.display_name} API request failed: {exc}") from exc

        if response.status_code == 404:
            raise ItemNotFound(f"{resource} not found")
        if not response.is_success:
            raise UpstreamError(
                f"{self.display_name} API error: {response.status_code}",
                upstream_status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"{self.display_name} API returned invalid JSON") from exc

    async def get_optional(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> Any | None:
        """Fetch a best-effort enrichment resource; never retried, never raises."""
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.debug("Optional %s request %s failed: %s", self.display_name, path, exc)
            return None

        if not response.is_success:
            logger.debug(
                "Optional %s request %s returned %s",
                self.display_name,
                path,
                response.status_code,
            )
            return None
        try:
            return response.json()
        except ValueError:
            logger.debug("Optional %s request %s returned invalid JSON", self.display_name, path)
            return None

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()


def _retry_policy(attempts: int) -> AsyncRetrying:
    return AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )


__all__ = ["CatalogClient", "DEFAULT_RETRIES", "DEFAULT_TIMEOUT", "USER_AGENT"]
