from __future__ import annotations

from typing import Any

from media_resolver.clients.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, CatalogClient

DEFAULT_BASE_URL = "https://api.jikan.moe/v4"


class JikanClient(CatalogClient):
    """Jikan v4 (MyAnimeList) client. ``family`` is ``anime`` or ``manga``."""

    display_name = "Jikan"

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        super().__init__(base_url, timeout=timeout, retries=retries)

    async def full(self, family: str, mal_id: str) -> dict[str, Any]:
        return await self.get_primary(f"/{family}/{mal_id}/full", resource=family.capitalize())

    async def characters(self, family: str, mal_id: str) -> dict[str, Any] | None:
        # Jikan throttles aggressively; a single attempt is all we spend here.
        return await self.get_optional(f"/{family}/{mal_id}/characters")


__all__ = ["JikanClient"]
