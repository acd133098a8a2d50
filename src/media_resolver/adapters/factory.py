from __future__ import annotations

from media_resolver.adapters.base import MediaSourceAdapter
from media_resolver.adapters.jikan import JikanAdapter
from media_resolver.adapters.openlibrary import OpenLibraryAdapter
from media_resolver.adapters.tmdb import TMDBAdapter
from media_resolver.clients.jikan import JikanClient
from media_resolver.clients.openlibrary import OpenLibraryClient
from media_resolver.clients.tmdb import TMDBClient
from media_resolver.config import Settings
from media_resolver.models import SourceKind
from media_resolver.services.rate_limit import RateLimiter


def build_rate_limiter(settings: Settings) -> RateLimiter:
    return RateLimiter(
        budget=settings.rate_limit_budget,
        window_seconds=settings.rate_limit_window,
    )


def build_adapters(
    settings: Settings,
    rate_limiter: RateLimiter,
) -> dict[SourceKind, MediaSourceAdapter]:
    """Construct one adapter per upstream, all sharing ``rate_limiter``.

    The TMDB adapter is always registered; a missing API key surfaces as
    ``ConfigurationMissing`` on first use rather than at startup.
    """

    timeout = settings.http_timeout
    retries = settings.http_retries

    tmdb = TMDBAdapter(
        TMDBClient(
            settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            timeout=timeout,
            retries=retries,
        ),
        rate_limiter,
        image_base_url=settings.tmdb_image_base_url,
    )
    openlibrary = OpenLibraryAdapter(
        OpenLibraryClient(
            base_url=settings.openlibrary_base_url,
            timeout=timeout,
            retries=retries,
        ),
        rate_limiter,
        covers_url=settings.openlibrary_covers_url,
    )
    jikan = JikanAdapter(
        JikanClient(base_url=settings.jikan_base_url, timeout=timeout, retries=retries),
        rate_limiter,
    )

    return {
        SourceKind.TMDB: tmdb,
        SourceKind.OPENLIBRARY: openlibrary,
        SourceKind.JIKAN: jikan,
    }


__all__ = ["build_adapters", "build_rate_limiter"]
