from __future__ import annotations

import logging

from media_resolver.errors import RecordNotFound, UpstreamError
from media_resolver.models import (
    CanonicalMediaItem,
    MediaKind,
    PersistedRecord,
    SourceKind,
    year_from_date,
)
from media_resolver.services.normalizer import normalize
from media_resolver.services.routing import source_for_identifier
from media_resolver.stores.base import ItemStore

logger = logging.getLogger(__name__)


class FallbackResolver:
    """Reconstructs canonical items from stored records without touching upstreams."""

    def __init__(self, store: ItemStore) -> None:
        self._store = store

    async def load(self, key: str, media_kind: MediaKind) -> PersistedRecord:
        """Stored record for ``key``; a missing row or a failed lookup raises RecordNotFound."""
        try:
            record = await self._store.get_record(key, media_kind)
        except UpstreamError as exc:
            logger.warning("Item store lookup failed for %s: %s", key, exc)
            raise RecordNotFound(f"Media item not found in database: {key}") from exc
        if record is None:
            raise RecordNotFound(f"Media item not found in database: {key}")
        return record

    @staticmethod
    def to_item(record: PersistedRecord) -> CanonicalMediaItem:
        metadata = dict(record.metadata or {})
        raw = {
            "id": record.id,
            "external_id": record.external_id,
            "title": record.title,
            "media_kind": record.media_type,
            "year": year_from_date(record.release_date),
            "release_date": record.release_date,
            "poster": record.poster_url,
            "description": record.description,
            "genres": record.genres,
            "rating": record.average_rating,
            "vote_count": record.rating_count,
            "metadata": metadata,
        }
        return normalize(raw, record_source(record))


def record_source(record: PersistedRecord) -> SourceKind:
    """Source stamped on a stored record.

    A tagged external id decides; ``metadata["source"]`` is only consulted for
    untagged ids, and anything unrecognised is ``SourceKind.UNKNOWN``.
    """
    tagged = source_for_identifier(record.external_id)
    if tagged is not SourceKind.UNKNOWN:
        return tagged

    declared = (record.metadata or {}).get("source")
    if isinstance(declared, str):
        try:
            return SourceKind(declared)
        except ValueError:
            logger.debug("Record %s declares unknown source %r", record.id, declared)
    return SourceKind.UNKNOWN


__all__ = ["FallbackResolver", "record_source"]
