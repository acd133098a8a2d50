"""TMDB adapter for movies and TV shows.

Known ``metadata`` keys (movie): budget, revenue, homepage, imdbId, tagline,
productionCompanies, productionCountries, spokenLanguages, keywords,
castWithDetails, crew, trailerKey, certification, popularity, adult.

Known ``metadata`` keys (tv): homepage, networks, productionCompanies,
productionCountries, spokenLanguages, lastAirDate, inProduction, creators,
keywords, castWithDetails, crew, trailerKey, contentRating, popularity, seasons.
"""

from __future__ import annotations

import logging
from typing import Any

from media_resolver.adapters.base import gather_optional, names_of
from media_resolver.clients.tmdb import TMDBClient
from media_resolver.errors import ConfigurationMissing, KindSourceMismatch
from media_resolver.models import CanonicalMediaItem, MediaKind, SourceKind, year_from_date
from media_resolver.services.normalizer import normalize
from media_resolver.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
MAX_CAST = 15
MAX_CREW = 20


class TMDBAdapter:
    name = "tmdb"
    source_kind = SourceKind.TMDB
    media_kinds = frozenset({MediaKind.MOVIE, MediaKind.TV})

    def __init__(
        self,
        client: TMDBClient,
        rate_limiter: RateLimiter,
        *,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    ) -> None:
        self._client = client
        self._rate_limiter = rate_limiter
        self._image_base_url = image_base_url.rstrip("/")

    async def close(self) -> None:
        await self._client.close()

    async def fetch_detail(self, external_id: str, media_kind: MediaKind) -> CanonicalMediaItem:
        if media_kind not in self.media_kinds:
            raise KindSourceMismatch(f"TMDB does not support media type: {media_kind.value}")
        if not self._client.has_credentials:
            raise ConfigurationMissing("TMDB API key not configured")
        self._rate_limiter.require(self.name)

        if media_kind is MediaKind.MOVIE:
            movie = await self._client.movie(external_id)
            credits, videos = await gather_optional(
                self._client.credits("movie", external_id),
                self._client.videos("movie", external_id),
            )
            raw = self._map_movie(movie, credits, videos, external_id)
        else:
            tv = await self._client.tv(external_id)
            credits, videos = await gather_optional(
                self._client.credits("tv", external_id),
                self._client.videos("tv", external_id),
            )
            raw = self._map_tv(tv, credits, videos, external_id)

        logger.debug("Fetched TMDB %s %s", media_kind.value, external_id)
        return normalize(raw, self.source_kind)

    def _map_movie(
        self,
        movie: dict[str, Any],
        credits: dict[str, Any] | None,
        videos: dict[str, Any] | None,
        requested_id: str,
    ) -> dict[str, Any]:
        tmdb_id = str(movie.get("id") or requested_id)
        title = movie.get("title")
        original_title = movie.get("original_title")
        cast_details = _cast_details(credits)
        crew = (credits or {}).get("crew") or []

        director = next(
            (person.get("name") for person in crew if person.get("job") == "Director"),
            None,
        )

        return {
            "id": f"tmdb-{tmdb_id}",
            "external_id": tmdb_id,
            "title": title,
            "original_title": original_title if original_title != title else None,
            "media_kind": MediaKind.MOVIE,
            "year": year_from_date(movie.get("release_date")),
            "release_date": movie.get("release_date") or None,
            "poster": self._image(movie.get("poster_path"), "w500"),
            "backdrop": self._image(movie.get("backdrop_path"), "w1280"),
            "description": movie.get("overview") or None,
            "rating": movie.get("vote_average") or None,
            "vote_count": movie.get("vote_count") or None,
            "genres": names_of(movie.get("genres")),
            "runtime": movie.get("runtime") or None,
            "status": movie.get("status") or None,
            "language": movie.get("original_language") or None,
            "director": director,
            "cast": [detail["name"] for detail in cast_details if detail.get("name")],
            "metadata": {
                "budget": movie.get("budget"),
                "revenue": movie.get("revenue"),
                "homepage": movie.get("homepage"),
                "imdbId": movie.get("imdb_id"),
                "tagline": movie.get("tagline"),
                "productionCompanies": names_of(movie.get("production_companies")),
                "productionCountries": names_of(movie.get("production_countries")),
                "spokenLanguages": names_of(movie.get("spoken_languages"), "english_name"),
                "keywords": names_of((movie.get("keywords") or {}).get("keywords")),
                "castWithDetails": cast_details,
                "crew": crew[:MAX_CREW],
                "trailerKey": _trailer_key(videos),
                "certification": _us_entry(
                    (movie.get("releases") or {}).get("countries"), "certification"
                ),
                "popularity": movie.get("popularity"),
                "adult": movie.get("adult"),
            },
        }

    def _map_tv(
        self,
        tv: dict[str, Any],
        credits: dict[str, Any] | None,
        videos: dict[str, Any] | None,
        requested_id: str,
    ) -> dict[str, Any]:
        tmdb_id = str(tv.get("id") or requested_id)
        title = tv.get("name")
        original_title = tv.get("original_name")
        cast_details = _cast_details(credits)
        crew = (credits or {}).get("crew") or []
        creators = names_of(tv.get("created_by"))
        seasons = tv.get("number_of_seasons")

        return {
            "id": f"tmdb-{tmdb_id}",
            "external_id": tmdb_id,
            "title": title,
            "original_title": original_title if original_title != title else None,
            "media_kind": MediaKind.TV,
            "year": year_from_date(tv.get("first_air_date")),
            "release_date": tv.get("first_air_date") or None,
            "poster": self._image(tv.get("poster_path"), "w500"),
            "backdrop": self._image(tv.get("backdrop_path"), "w1280"),
            "description": tv.get("overview") or None,
            "rating": tv.get("vote_average") or None,
            "vote_count": tv.get("vote_count") or None,
            "genres": names_of(tv.get("genres")),
            "episodes": tv.get("number_of_episodes") or None,
            "season": season_phrase(seasons),
            "status": tv.get("status") or None,
            "language": tv.get("original_language") or None,
            "cast": [detail["name"] for detail in cast_details if detail.get("name")],
            "director": ", ".join(creators) if creators else None,
            "metadata": {
                "homepage": tv.get("homepage"),
                "networks": names_of(tv.get("networks")),
                "productionCompanies": names_of(tv.get("production_companies")),
                "productionCountries": names_of(tv.get("production_countries")),
                "spokenLanguages": names_of(tv.get("spoken_languages"), "english_name"),
                "lastAirDate": tv.get("last_air_date"),
                "inProduction": tv.get("in_production"),
                "creators": creators,
                "keywords": names_of((tv.get("keywords") or {}).get("results")),
                "castWithDetails": cast_details,
                "crew": crew[:MAX_CREW],
                "trailerKey": _trailer_key(videos),
                "contentRating": _us_entry(
                    (tv.get("content_ratings") or {}).get("results"), "rating"
                ),
                "popularity": tv.get("popularity"),
                "seasons": [
                    {
                        "seasonNumber": season.get("season_number"),
                        "episodeCount": season.get("episode_count"),
                        "airDate": season.get("air_date"),
                        "name": season.get("name"),
                        "overview": season.get("overview"),
                        "posterPath": season.get("poster_path"),
                    }
                    for season in tv.get("seasons") or []
                ],
            },
        }

    def _image(self, path: str | None, size: str) -> str | None:
        if not path:
            return None
        return f"{self._image_base_url}/{size}{path}"


def season_phrase(count: int | None) -> str | None:
    if not count:
        return None
    return f"{count} season" if count == 1 else f"{count} seasons"


def _cast_details(credits: dict[str, Any] | None) -> list[dict[str, Any]]:
    cast = (credits or {}).get("cast") or []
    return [
        {
            "name": actor.get("name"),
            "character": actor.get("character"),
            "profilePath": actor.get("profile_path"),
        }
        for actor in cast[:MAX_CAST]
    ]


def _trailer_key(videos: dict[str, Any] | None) -> str | None:
    for video in (videos or {}).get("results") or []:
        if video.get("type") == "Trailer" and video.get("site") == "YouTube":
            return video.get("key")
    return None


def _us_entry(entries: list[dict[str, Any]] | None, field: str) -> Any:
    for entry in entries or []:
        if entry.get("iso_3166_1") == "US":
            return entry.get(field)
    return None


__all__ = ["TMDBAdapter", "season_phrase"]
