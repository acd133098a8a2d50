from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from media_resolver.models import MediaKind, PersistedRecord


class InMemoryItemStore:
    """Item store backed by a dict, keyed by ``(record id, media type)``."""

    def __init__(self, records: Iterable[PersistedRecord | Mapping[str, Any]] = ()) -> None:
        self._records: dict[tuple[str, str], PersistedRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: PersistedRecord | Mapping[str, Any]) -> PersistedRecord:
        if not isinstance(record, PersistedRecord):
            record = PersistedRecord.model_validate(record)
        self._records[(record.id.lower(), record.media_type)] = record
        return record

    async def get_record(self, key: str, media_kind: MediaKind) -> PersistedRecord | None:
        return self._records.get((key.lower(), media_kind.value))

    async def close(self) -> None:
        return None


__all__ = ["InMemoryItemStore"]
