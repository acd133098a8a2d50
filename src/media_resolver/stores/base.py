from __future__ import annotations

from typing import Protocol

from media_resolver.models import MediaKind, PersistedRecord


class ItemStore(Protocol):
    """Read-only view of the external item store used as a fallback source."""

    async def get_record(self, key: str, media_kind: MediaKind) -> PersistedRecord | None:
        """Return the record stored under ``key`` for ``media_kind``, or ``None``."""

    async def close(self) -> None:
        """Release any underlying connection."""


__all__ = ["ItemStore"]
