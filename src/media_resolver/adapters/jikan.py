"""Jikan (MyAnimeList) adapter for anime and manga.

Known ``metadata`` keys (both): malId, type, rank, popularity, members,
favorites, themes, demographics, explicitGenres, characters, titleSynonyms,
titleEnglish, approved, background.
Anime adds: source, duration, rating, broadcast, aired, season, year,
producers, licensors, studios, trailer.
Manga adds: chapters, volumes, published, authors, serializations.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from media_resolver.adapters.base import gather_optional, names_of
from media_resolver.clients.jikan import JikanClient
from media_resolver.errors import KindSourceMismatch, UpstreamError
from media_resolver.models import CanonicalMediaItem, MediaKind, SourceKind, year_from_date
from media_resolver.services.normalizer import normalize
from media_resolver.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

MAX_CHARACTERS = 10
MAX_VOICE_ACTORS = 2
_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_duration_minutes(duration: str | None) -> int | None:
    """Leading integer of a free-text duration ("24 min per ep" -> 24)."""
    if not duration:
        return None
    match = _LEADING_INT.match(duration)
    return int(match.group(1)) if match else None


class JikanAdapter:
    name = "jikan"
    source_kind = SourceKind.JIKAN
    media_kinds = frozenset({MediaKind.ANIME, MediaKind.MANGA})

    def __init__(self, client: JikanClient, rate_limiter: RateLimiter) -> None:
        self._client = client
        self._rate_limiter = rate_limiter

    async def close(self) -> None:
        await self._client.close()

    async def fetch_detail(self, external_id: str, media_kind: MediaKind) -> CanonicalMediaItem:
        if media_kind not in self.media_kinds:
            raise KindSourceMismatch(f"Jikan does not support media type: {media_kind.value}")
        self._rate_limiter.require(self.name)

        family = media_kind.value
        payload = await self._client.full(family, external_id)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise UpstreamError("Jikan API returned an unexpected payload")

        (characters_payload,) = await gather_optional(
            self._client.characters(family, external_id)
        )

        is_anime = media_kind is MediaKind.ANIME
        characters = _characters(characters_payload, with_voice_actors=is_anime)
        if is_anime:
            raw = _map_anime(data, external_id, characters)
        else:
            raw = _map_manga(data, external_id, characters)

        logger.debug("Fetched Jikan %s %s", family, external_id)
        return normalize(raw, self.source_kind)


def _map_anime(
    anime: dict[str, Any], requested_id: str, characters: list[dict[str, Any]]
) -> dict[str, Any]:
    mal_id = str(anime.get("mal_id") or requested_id)
    title = anime.get("title")
    title_japanese = anime.get("title_japanese")
    image = _large_image(anime)
    trailer = anime.get("trailer") or {}
    studios = names_of(anime.get("studios"))

    return {
        "id": f"jikan-anime-{mal_id}",
        "external_id": mal_id,
        "title": title,
        "original_title": title_japanese if title_japanese != title else None,
        "media_kind": MediaKind.ANIME,
        "year": anime.get("year") or None,
        "release_date": (anime.get("aired") or {}).get("from") or None,
        "poster": image,
        "backdrop": ((anime.get("images") or {}).get("jpg") or {}).get("large_image_url") or None,
        "description": anime.get("synopsis") or None,
        "rating": anime.get("score") or None,
        "vote_count": anime.get("scored_by") or None,
        "genres": names_of(anime.get("genres")),
        "episodes": anime.get("episodes") or None,
        "status": anime.get("status") or None,
        "studio": studios[0] if studios else None,
        "runtime": parse_duration_minutes(anime.get("duration")),
        "metadata": {
            **_shared_metadata(anime, characters),
            "source": anime.get("source"),
            "duration": anime.get("duration"),
            "rating": anime.get("rating"),
            "broadcast": anime.get("broadcast"),
            "aired": anime.get("aired"),
            "season": anime.get("season"),
            "year": anime.get("year"),
            "producers": names_of(anime.get("producers")),
            "licensors": names_of(anime.get("licensors")),
            "studios": studios,
            "trailer": (
                {
                    "youtubeId": trailer.get("youtube_id"),
                    "url": trailer.get("url"),
                    "embedUrl": trailer.get("embed_url"),
                }
                if trailer.get("youtube_id")
                else None
            ),
        },
    }


def _map_manga(
    manga: dict[str, Any], requested_id: str, characters: list[dict[str, Any]]
) -> dict[str, Any]:
    mal_id = str(manga.get("mal_id") or requested_id)
    title = manga.get("title")
    title_japanese = manga.get("title_japanese")
    published = manga.get("published") or {}
    authors = names_of(manga.get("authors"))

    return {
        "id": f"jikan-manga-{mal_id}",
        "external_id": mal_id,
        "title": title,
        "original_title": title_japanese if title_japanese != title else None,
        "media_kind": MediaKind.MANGA,
        "year": year_from_date(published.get("from")),
        "release_date": published.get("from") or None,
        "poster": _large_image(manga),
        "description": manga.get("synopsis") or None,
        "rating": manga.get("score") or None,
        "vote_count": manga.get("scored_by") or None,
        "genres": names_of(manga.get("genres")),
        "status": manga.get("status") or None,
        "author": ", ".join(authors) if authors else None,
        "pages": manga.get("chapters") or None,
        "metadata": {
            **_shared_metadata(manga, characters),
            "chapters": manga.get("chapters"),
            "volumes": manga.get("volumes"),
            "published": manga.get("published"),
            "authors": [
                {"name": author.get("name"), "role": author.get("role")}
                for author in manga.get("authors") or []
            ],
            "serializations": names_of(manga.get("serializations")),
        },
    }


def _shared_metadata(entry: dict[str, Any], characters: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "malId": entry.get("mal_id"),
        "type": entry.get("type"),
        "rank": entry.get("rank"),
        "popularity": entry.get("popularity"),
        "members": entry.get("members"),
        "favorites": entry.get("favorites"),
        "themes": names_of(entry.get("themes")),
        "demographics": names_of(entry.get("demographics")),
        "explicitGenres": names_of(entry.get("explicit_genres")),
        "characters": characters,
        "titleSynonyms": entry.get("title_synonyms") or [],
        "titleEnglish": entry.get("title_english"),
        "approved": entry.get("approved"),
        "background": entry.get("background"),
    }


def _large_image(entry: dict[str, Any]) -> str | None:
    jpg = (entry.get("images") or {}).get("jpg") or {}
    return jpg.get("large_image_url") or jpg.get("image_url") or None


def _characters(payload: dict[str, Any] | None, *, with_voice_actors: bool) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        return []
    characters: list[dict[str, Any]] = []
    for entry in (payload.get("data") or [])[:MAX_CHARACTERS]:
        character: dict[str, Any] = {
            "name": (entry.get("character") or {}).get("name"),
            "role": entry.get("role"),
        }
        if with_voice_actors:
            character["voiceActors"] = [
                (actor.get("person") or {}).get("name")
                for actor in (entry.get("voice_actors") or [])[:MAX_VOICE_ACTORS]
            ]
        characters.append(character)
    return characters


__all__ = ["JikanAdapter", "parse_duration_minutes"]
