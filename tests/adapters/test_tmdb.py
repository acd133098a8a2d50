"""Tests for the TMDB adapter."""

import httpx
import pytest
import respx

from media_resolver.adapters.tmdb import TMDBAdapter, season_phrase
from media_resolver.clients.tmdb import TMDBClient
from media_resolver.errors import (
    ConfigurationMissing,
    ItemNotFound,
    KindSourceMismatch,
    RateLimitExceeded,
    UpstreamError,
)
from media_resolver.models import MediaKind, SourceKind
from media_resolver.services.rate_limit import RateLimiter
from tests.fixtures.tmdb_responses import (
    MOVIE_CREDITS_RESPONSE,
    MOVIE_DETAIL_RESPONSE,
    MOVIE_VIDEOS_RESPONSE,
    TV_DETAIL_RESPONSE,
    TV_SINGLE_SEASON_RESPONSE,
)

BASE = "https://api.themoviedb.org/3"


@pytest.fixture
def limiter():
    return RateLimiter(budget=10, window_seconds=60)


@pytest.fixture
def adapter(limiter):
    return TMDBAdapter(TMDBClient("test-key", retries=1), limiter)


def _mock_movie(credits_status=200, videos_status=200):
    respx.get(f"{BASE}/movie/550").mock(
        side_effect=lambda request: httpx.Response(200, json=MOVIE_DETAIL_RESPONSE)
    )
    respx.get(f"{BASE}/movie/550/credits").mock(
        side_effect=lambda request: httpx.Response(credits_status, json=MOVIE_CREDITS_RESPONSE)
    )
    respx.get(f"{BASE}/movie/550/videos").mock(
        side_effect=lambda request: httpx.Response(videos_status, json=MOVIE_VIDEOS_RESPONSE)
    )


class TestTMDBMovie:
    @pytest.mark.asyncio
    @respx.mock
    async def test_movie_scenario(self, adapter):
        _mock_movie()

        item = await adapter.fetch_detail("550", MediaKind.MOVIE)

        assert item.id == "tmdb-550"
        assert item.external_id == "550"
        assert item.media_kind is MediaKind.MOVIE
        assert item.source is SourceKind.TMDB
        assert item.title == "Fight Club"
        assert item.original_title is None
        assert item.year == 1999
        assert item.release_date == "1999-10-15"
        assert item.poster == "https://image.tmdb.org/t/p/w500/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg"
        assert item.backdrop == "https://image.tmdb.org/t/p/w1280/hZkgoQYus5vegHoetLkCJzb17zJ.jpg"
        assert item.genres == ["Drama", "Thriller"]
        assert item.runtime == 139
        assert item.director == "David Fincher"
        assert item.cast is not None
        assert len(item.cast) == 15
        assert item.cast[0] == "Actor 1"
        assert item.metadata["trailerKey"] == "BdJKm16Co6M"
        assert item.metadata["certification"] == "R"
        assert item.metadata["keywords"] == ["support group", "dual identity"]
        assert item.metadata["spokenLanguages"] == ["English"]
        assert len(item.metadata["castWithDetails"]) == 15
        assert item.metadata["castWithDetails"][0] == {
            "name": "Actor 1",
            "character": "Role 1",
            "profilePath": "/p1.jpg",
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_auxiliary_requests_are_absorbed(self, adapter):
        _mock_movie(credits_status=500, videos_status=429)

        item = await adapter.fetch_detail("550", MediaKind.MOVIE)

        assert item.title == "Fight Club"
        assert item.director is None
        assert item.cast == []
        assert item.metadata["trailerKey"] is None
        assert item.metadata["crew"] == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_primary_not_found(self, adapter):
        respx.get(f"{BASE}/movie/550").mock(return_value=httpx.Response(404))
        credits = respx.get(f"{BASE}/movie/550/credits").mock(
            return_value=httpx.Response(200, json=MOVIE_CREDITS_RESPONSE)
        )

        with pytest.raises(ItemNotFound, match="Movie not found"):
            await adapter.fetch_detail("550", MediaKind.MOVIE)
        assert not credits.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_primary_server_error(self, adapter):
        respx.get(f"{BASE}/movie/550").mock(return_value=httpx.Response(502))

        with pytest.raises(UpstreamError) as excinfo:
            await adapter.fetch_detail("550", MediaKind.MOVIE)
        assert excinfo.value.upstream_status == 502

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_api_key(self, limiter):
        adapter = TMDBAdapter(TMDBClient(None, retries=1), limiter)
        route = respx.get(f"{BASE}/movie/550")

        with pytest.raises(ConfigurationMissing):
            await adapter.fetch_detail("550", MediaKind.MOVIE)
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_blocks_before_network(self):
        limiter = RateLimiter(budget=1, window_seconds=60)
        adapter = TMDBAdapter(TMDBClient("test-key", retries=1), limiter)
        assert limiter.admit("tmdb") is True
        route = respx.get(f"{BASE}/movie/550")

        with pytest.raises(RateLimitExceeded) as excinfo:
            await adapter.fetch_detail("550", MediaKind.MOVIE)
        assert excinfo.value.source == "tmdb"
        assert not route.called

    @pytest.mark.asyncio
    async def test_rejects_unsupported_kind(self, adapter):
        with pytest.raises(KindSourceMismatch, match="book"):
            await adapter.fetch_detail("550", MediaKind.BOOK)

    @pytest.mark.asyncio
    @respx.mock
    async def test_resolution_is_repeatable(self, adapter):
        _mock_movie()

        first = await adapter.fetch_detail("550", MediaKind.MOVIE)
        second = await adapter.fetch_detail("550", MediaKind.MOVIE)

        assert first == second
        assert first.to_payload() == second.to_payload()


class TestTMDBTV:
    @pytest.mark.asyncio
    @respx.mock
    async def test_tv_mapping(self, adapter):
        respx.get(f"{BASE}/tv/1399").mock(
            return_value=httpx.Response(200, json=TV_DETAIL_RESPONSE)
        )
        respx.get(f"{BASE}/tv/1399/credits").mock(
            return_value=httpx.Response(200, json={"cast": [{"name": "Emilia Clarke"}], "crew": []})
        )
        respx.get(f"{BASE}/tv/1399/videos").mock(side_effect=httpx.ConnectError("refused"))

        item = await adapter.fetch_detail("1399", MediaKind.TV)

        assert item.id == "tmdb-1399"
        assert item.media_kind is MediaKind.TV
        assert item.title == "Game of Thrones"
        assert item.year == 2011
        assert item.director == "David Benioff, D. B. Weiss"
        assert item.season == "8 seasons"
        assert item.episodes == 73
        assert item.cast == ["Emilia Clarke"]
        assert item.runtime is None
        assert item.metadata["contentRating"] == "TV-MA"
        assert item.metadata["networks"] == ["HBO"]
        assert item.metadata["seasons"][0]["episodeCount"] == 10
        assert item.metadata["trailerKey"] is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_single_season_phrase(self, adapter):
        respx.get(f"{BASE}/tv/87108").mock(
            return_value=httpx.Response(200, json=TV_SINGLE_SEASON_RESPONSE)
        )
        respx.get(f"{BASE}/tv/87108/credits").mock(return_value=httpx.Response(404))
        respx.get(f"{BASE}/tv/87108/videos").mock(return_value=httpx.Response(404))

        item = await adapter.fetch_detail("87108", MediaKind.TV)

        assert item.season == "1 season"
        assert item.director == "Craig Mazin"
        assert item.poster is None


def test_season_phrase():
    assert season_phrase(None) is None
    assert season_phrase(0) is None
    assert season_phrase(1) == "1 season"
    assert season_phrase(3) == "3 seasons"
