from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

_YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d)")


class MediaKind(str, Enum):
    MOVIE = "movie"
    TV = "tv"
    BOOK = "book"
    ANIME = "anime"
    MANGA = "manga"


class SourceKind(str, Enum):
    """Upstream that produced a canonical item; ``UNKNOWN`` only on stored records."""

    TMDB = "tmdb"
    OPENLIBRARY = "openlibrary"
    JIKAN = "jikan"
    UNKNOWN = "unknown"


class CanonicalMediaItem(BaseModel):
    """Unified media detail returned to every caller regardless of origin."""

    id: str
    external_id: str = Field(alias="externalId")
    title: str | None = None
    original_title: str | None = Field(default=None, alias="originalTitle")
    media_kind: MediaKind = Field(alias="type")
    year: int | None = None
    release_date: str | None = Field(default=None, alias="releaseDate")
    poster: str | None = None
    backdrop: str | None = None
    description: str | None = None
    rating: float | None = None
    vote_count: int | None = Field(default=None, alias="voteCount")
    genres: list[str] = Field(default_factory=list)

    runtime: int | None = None
    status: str | None = None
    language: str | None = None
    director: str | None = None
    cast: list[str] | None = None
    author: str | None = None
    publisher: str | None = None
    pages: int | None = None
    isbn: str | None = None
    studio: str | None = None
    episodes: int | None = None
    season: str | None = None

    source: SourceKind = SourceKind.UNKNOWN
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready camelCase mapping with absent optional fields omitted.

        Only top-level ``None`` values are dropped; ``metadata`` is emitted as-is.
        """
        dumped = self.model_dump(by_alias=True, mode="json")
        return {key: value for key, value in dumped.items() if value is not None}


class PersistedRecord(BaseModel):
    """Row shape of the external item store (``media_items``)."""

    id: str
    external_id: str
    media_type: str
    title: str | None = None
    description: str | None = None
    poster_url: str | None = None
    release_date: str | None = None
    genres: list[str] | None = None
    metadata: dict[str, Any] | None = None
    average_rating: float | None = None
    rating_count: int | None = None

    model_config = {
        "extra": "ignore",
    }


def year_from_date(value: Any) -> int | None:
    """Extract the first four-digit year from a date string ("1999-10-15", "May 1954")."""
    if not isinstance(value, str):
        return None
    match = _YEAR_PATTERN.search(value)
    return int(match.group(1)) if match else None


__all__ = [
    "CanonicalMediaItem",
    "MediaKind",
    "PersistedRecord",
    "SourceKind",
    "year_from_date",
]
