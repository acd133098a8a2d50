from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from media_resolver.clients.base import DEFAULT_TIMEOUT, USER_AGENT
from media_resolver.errors import UpstreamError
from media_resolver.models import MediaKind, PersistedRecord

logger = logging.getLogger(__name__)

TABLE = "media_items"


class SupabaseItemStore:
    """Reads ``media_items`` rows through the Supabase PostgREST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        normalized_url = base_url.rstrip("/")
        if not normalized_url.endswith("/rest/v1"):
            normalized_url = f"{normalized_url}/rest/v1"

        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=normalized_url,
            headers=headers,
            timeout=timeout,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_record(self, key: str, media_kind: MediaKind) -> PersistedRecord | None:
        params = {
            "id": f"eq.{key}",
            "media_type": f"eq.{media_kind.value}",
            "select": "*",
            "limit": "1",
        }
        try:
            response = await self._client.get(f"/{TABLE}", params=params)
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(f"Item store lookup failed: {exc}") from exc

        if not isinstance(rows, list) or not rows:
            return None
        try:
            return PersistedRecord.model_validate(rows[0])
        except ValidationError as exc:
            logger.warning("Stored record %s has an unexpected shape: %s", key, exc)
            raise UpstreamError(f"Item store returned a malformed record for {key}") from exc

    async def __aenter__(self) -> SupabaseItemStore:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()


__all__ = ["SupabaseItemStore"]
