from __future__ import annotations

from typing import Any

from media_resolver.clients.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, CatalogClient

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"


class TMDBClient(CatalogClient):
    """Thin asynchronous wrapper around the TMDB v3 API."""

    display_name = "TMDB"

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        self._api_key = api_key
        super().__init__(
            base_url,
            timeout=timeout,
            retries=retries,
            params={"api_key": api_key} if api_key else None,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    async def movie(self, movie_id: str) -> dict[str, Any]:
        return await self.get_primary(
            f"/movie/{movie_id}",
            params={"append_to_response": "keywords,releases"},
            resource="Movie",
        )

    async def tv(self, tv_id: str) -> dict[str, Any]:
        return await self.get_primary(
            f"/tv/{tv_id}",
            params={"append_to_response": "keywords,content_ratings"},
            resource="TV show",
        )

    async def credits(self, family: str, item_id: str) -> dict[str, Any] | None:
        return await self.get_optional(f"/{family}/{item_id}/credits")

    async def videos(self, family: str, item_id: str) -> dict[str, Any] | None:
        return await self.get_optional(f"/{family}/{item_id}/videos")


__all__ = ["TMDBClient"]
