"""Open Library adapter for books.

Known ``metadata`` keys: subtitle, deweyDecimalClass, lcClassifications, links,
excerpts, firstSentence, authorDetails, editionCount, publishDates,
physicalFormat, weight, dimensions, tableOfContents, notes, workId, covers,
subjects, subjectPlaces, subjectTimes, subjectPeople.
"""

from __future__ import annotations

import logging
from typing import Any

from media_resolver.adapters.base import gather_optional
from media_resolver.clients.openlibrary import OpenLibraryClient
from media_resolver.errors import KindSourceMismatch, UnsupportedIdentifierFormat
from media_resolver.models import CanonicalMediaItem, MediaKind, SourceKind, year_from_date
from media_resolver.services.normalizer import normalize
from media_resolver.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_COVERS_URL = "https://covers.openlibrary.org"
WORKS_PREFIX = "/works/"
MAX_AUTHORS = 3
MAX_SUBJECTS = 15


def normalize_work_key(identifier: str) -> str:
    """Canonical ``/works/OL...W`` path for ``OL123W``, ``ol-OL123W`` or ``/works/OL123W``."""
    key = identifier.strip()
    if key.startswith("ol-"):
        key = key[len("ol-") :]
    if not key.startswith(WORKS_PREFIX):
        key = f"{WORKS_PREFIX}{key.lstrip('/')}"
    if key == WORKS_PREFIX:
        raise UnsupportedIdentifierFormat(f"Unsupported ID format: {identifier}")
    return key


class OpenLibraryAdapter:
    name = "openlibrary"
    source_kind = SourceKind.OPENLIBRARY
    media_kinds = frozenset({MediaKind.BOOK})

    def __init__(
        self,
        client: OpenLibraryClient,
        rate_limiter: RateLimiter,
        *,
        covers_url: str = DEFAULT_COVERS_URL,
    ) -> None:
        self._client = client
        self._rate_limiter = rate_limiter
        self._covers_url = covers_url.rstrip("/")

    async def close(self) -> None:
        await self._client.close()

    async def fetch_detail(self, external_id: str, media_kind: MediaKind) -> CanonicalMediaItem:
        if media_kind not in self.media_kinds:
            raise KindSourceMismatch(
                f"Open Library does not support media type: {media_kind.value}"
            )
        work_key = normalize_work_key(external_id)
        self._rate_limiter.require(self.name)

        work = await self._client.work(work_key)

        # Edition and author documents only exist once the work has been read.
        edition_key = _first_edition_key(work)
        author_keys = _author_keys(work)[:MAX_AUTHORS]
        tasks = [self._client.author(key) for key in author_keys]
        if edition_key:
            tasks.insert(0, self._client.edition(edition_key))
        results = await gather_optional(*tasks)

        edition = results.pop(0) if edition_key else None
        author_details = [_author_detail(author) for author in results if author]

        logger.debug("Fetched Open Library work %s", work_key)
        return normalize(self._map_work(work, work_key, edition, author_details), self.source_kind)

    def _map_work(
        self,
        work: dict[str, Any],
        work_key: str,
        edition: dict[str, Any] | None,
        author_details: list[dict[str, Any]],
    ) -> dict[str, Any]:
        work_id = work_key[len(WORKS_PREFIX) :]
        edition = edition or {}
        covers = work.get("covers") or []
        subjects = work.get("subjects") or []

        return {
            "id": f"ol-{work_id}",
            "external_id": work_id,
            "title": work.get("title"),
            "media_kind": MediaKind.BOOK,
            "year": year_from_date(work.get("first_publish_date")),
            "release_date": work.get("first_publish_date") or None,
            "poster": f"{self._covers_url}/b/id/{covers[0]}-L.jpg" if covers else None,
            "description": _text(work.get("description")),
            "genres": subjects[:MAX_SUBJECTS],
            "author": _author_names(work, author_details),
            "publisher": _first(edition.get("publishers")),
            "pages": edition.get("number_of_pages") or None,
            "isbn": _first(edition.get("isbn_13")) or _first(edition.get("isbn_10")),
            "language": _language(edition),
            "metadata": {
                "subtitle": work.get("subtitle"),
                "deweyDecimalClass": work.get("dewey_decimal_class"),
                "lcClassifications": work.get("lc_classifications"),
                "links": work.get("links") or [],
                "excerpts": work.get("excerpts") or [],
                "firstSentence": _text(work.get("first_sentence")),
                "authorDetails": author_details,
                "editionCount": work.get("edition_count"),
                "publishDates": edition.get("publish_date"),
                "physicalFormat": edition.get("physical_format"),
                "weight": edition.get("weight"),
                "dimensions": edition.get("dimensions"),
                "tableOfContents": work.get("table_of_contents"),
                "notes": _text(work.get("notes")),
                "workId": work_id,
                "covers": covers,
                "subjects": subjects,
                "subjectPlaces": work.get("subject_places") or [],
                "subjectTimes": work.get("subject_times") or [],
                "subjectPeople": work.get("subject_people") or [],
            },
        }


def _first_edition_key(work: dict[str, Any]) -> str | None:
    editions = work.get("editions") or []
    if not editions:
        return None
    first = editions[0]
    if isinstance(first, dict):
        return first.get("key")
    return first if isinstance(first, str) else None


def _author_keys(work: dict[str, Any]) -> list[str]:
    keys: list[str] = []
    for entry in work.get("authors") or []:
        author = entry.get("author") if isinstance(entry, dict) else None
        if isinstance(author, dict) and author.get("key"):
            keys.append(author["key"])
    return keys


def _author_detail(author: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": author.get("name"),
        "bio": _text(author.get("bio")),
        "birthDate": author.get("birth_date"),
        "deathDate": author.get("death_date"),
    }


def _author_names(work: dict[str, Any], author_details: list[dict[str, Any]]) -> str | None:
    names = [detail["name"] for detail in author_details if detail.get("name")]
    if not names:
        names = [
            entry["name"]
            for entry in work.get("authors") or []
            if isinstance(entry, dict) and entry.get("name")
        ]
    return ", ".join(names) if names else None


def _language(edition: dict[str, Any]) -> str | None:
    languages = edition.get("languages") or []
    if not languages or not isinstance(languages[0], dict):
        return None
    key = languages[0].get("key") or ""
    return key.replace("/languages/", "") or None


def _text(value: Any) -> str | None:
    """Open Library stores text either as a string or as ``{"type": ..., "value": ...}``."""
    if isinstance(value, dict):
        value = value.get("value")
    return value or None


def _first(values: list[Any] | None) -> Any:
    return values[0] if values else None


__all__ = ["OpenLibraryAdapter", "normalize_work_key"]
