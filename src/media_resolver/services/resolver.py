from __future__ import annotations

import logging
from collections.abc import Mapping

from media_resolver.adapters import MediaSourceAdapter, build_adapters, build_rate_limiter
from media_resolver.config import Settings
from media_resolver.errors import ConfigurationMissing, InputValidationError
from media_resolver.models import CanonicalMediaItem, MediaKind, SourceKind
from media_resolver.services.fallback import FallbackResolver
from media_resolver.services.rate_limit import RateLimiter
from media_resolver.services.routing import RecordKey, SourceKey, classify, parse_source_key
from media_resolver.stores import ItemStore, SupabaseItemStore

logger = logging.getLogger(__name__)

STATIC_ASSET_MARKERS = (".woff", ".ttf", ".eot", ".otf")


def validate_request(media_type: str | None, identifier: str | None) -> MediaKind:
    """Check raw request input before any routing or network activity."""
    if not media_type or not identifier or not media_type.strip() or not identifier.strip():
        raise InputValidationError("MISSING_PARAMS", "Missing type or id parameter")

    try:
        media_kind = MediaKind(media_type)
    except ValueError as exc:
        raise InputValidationError("INVALID_TYPE", f"Invalid media type: {media_type}") from exc

    lowered = identifier.lower()
    if any(marker in lowered for marker in STATIC_ASSET_MARKERS):
        raise InputValidationError(
            "INVALID_REQUEST", "Font files are not supported media types"
        )
    return media_kind


class MediaDetailService:
    """Routes an identifier to its source adapter, falling back to stored records.

    Only record keys have a fallback path; a source-tagged identifier commits to
    the live adapter and its failures propagate unchanged.
    """

    def __init__(
        self,
        adapters: Mapping[SourceKind, MediaSourceAdapter],
        *,
        store: ItemStore | None = None,
    ) -> None:
        self._adapters = dict(adapters)
        self._store = store
        self._fallback = FallbackResolver(store) if store is not None else None

    async def resolve(self, media_kind: MediaKind, identifier: str) -> CanonicalMediaItem:
        routed = classify(media_kind, identifier)
        if isinstance(routed, RecordKey):
            return await self._resolve_record(routed)
        return await self._fetch(routed)

    async def close(self) -> None:
        for adapter in self._adapters.values():
            await adapter.close()
        if self._store is not None:
            await self._store.close()

    async def _resolve_record(self, record_key: RecordKey) -> CanonicalMediaItem:
        if self._fallback is None:
            raise ConfigurationMissing("Item store not configured")

        record = await self._fallback.load(record_key.key, record_key.media_kind)
        try:
            source_key = parse_source_key(record_key.media_kind, record.external_id)
            return await self._fetch(source_key)
        except Exception as exc:
            logger.warning(
                "External fetch failed for %s (%s), falling back to stored record: %s",
                record_key.key,
                record.external_id,
                exc,
            )
        return self._fallback.to_item(record)

    async def _fetch(self, source_key: SourceKey) -> CanonicalMediaItem:
        adapter = self._adapters.get(source_key.source)
        if adapter is None:
            raise ConfigurationMissing(f"No adapter configured for {source_key.source.value}")
        return await adapter.fetch_detail(source_key.external_id, source_key.media_kind)


def build_media_service(
    settings: Settings,
    *,
    rate_limiter: RateLimiter | None = None,
    store: ItemStore | None = None,
) -> MediaDetailService:
    """Assemble the service from configuration; the item store is optional."""

    limiter = rate_limiter or build_rate_limiter(settings)
    if store is None and settings.has_item_store:
        store = SupabaseItemStore(
            settings.supabase_url or "",
            settings.supabase_key or "",
            timeout=settings.http_timeout,
        )
    return MediaDetailService(build_adapters(settings, limiter), store=store)


__all__ = [
    "MediaDetailService",
    "STATIC_ASSET_MARKERS",
    "build_media_service",
    "validate_request",
]
