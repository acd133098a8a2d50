from __future__ import annotations

from typing import Any

from media_resolver.clients.base import DEFAULT_RETRIES, DEFAULT_TIMEOUT, CatalogClient

DEFAULT_BASE_URL = "https://openlibrary.org"


class OpenLibraryClient(CatalogClient):
    """Open Library JSON documents addressed by their canonical key path."""

    display_name = "Open Library"

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        super().__init__(base_url, timeout=timeout, retries=retries)

    async def work(self, work_key: str) -> dict[str, Any]:
        """Fetch a work document, ``work_key`` like ``/works/OL45883W``."""
        return await self.get_primary(f"{work_key}.json", resource="Book")

    async def edition(self, edition_key: str) -> dict[str, Any] | None:
        return await self.get_optional(f"{edition_key}.json")

    async def author(self, author_key: str) -> dict[str, Any] | None:
        return await self.get_optional(f"{author_key}.json")


__all__ = ["OpenLibraryClient"]
