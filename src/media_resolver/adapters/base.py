from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import Any, Protocol

from media_resolver.models import CanonicalMediaItem, MediaKind, SourceKind

logger = logging.getLogger(__name__)


class MediaSourceAdapter(Protocol):
    """Translates one upstream catalog into canonical media items."""

    name: str
    source_kind: SourceKind
    media_kinds: frozenset[MediaKind]

    async def fetch_detail(self, external_id: str, media_kind: MediaKind) -> CanonicalMediaItem:
        """Fetch and normalize one item.

        Raises ItemNotFound, RateLimitExceeded, UpstreamError or ConfigurationMissing.
        """

    async def close(self) -> None:
        """Release the underlying HTTP client."""


async def gather_optional(*tasks: Awaitable[Any]) -> list[Any | None]:
    """Run best-effort tasks concurrently, replacing each failure with ``None``.

    A failing task never cancels its siblings; results keep the argument order.
    """
    if not tasks:
        return []
    results = await asyncio.gather(*tasks, return_exceptions=True)
    resolved: list[Any | None] = []
    for result in results:
        if isinstance(result, Exception):
            logger.debug("Optional enrichment failed: %s", result)
            resolved.append(None)
        elif isinstance(result, BaseException):
            raise result
        else:
            resolved.append(result)
    return resolved


def names_of(entries: Iterable[Any] | None, key: str = "name") -> list[str]:
    """Flatten a list of ``{"name": ...}`` objects into their names."""
    names: list[str] = []
    for entry in entries or []:
        if isinstance(entry, dict) and entry.get(key):
            names.append(str(entry[key]))
    return names


__all__ = ["MediaSourceAdapter", "gather_optional", "names_of"]
