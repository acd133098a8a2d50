from media_resolver.models import CanonicalMediaItem, MediaKind, SourceKind, year_from_date
from media_resolver.services.normalizer import normalize


def test_defaults_applied_for_missing_containers() -> None:
    item = normalize(
        {
            "id": "tmdb-1",
            "external_id": "1",
            "media_kind": "movie",
            "genres": None,
            "metadata": None,
        },
        SourceKind.TMDB,
    )

    assert item.genres == []
    assert item.metadata == {}
    assert item.source is SourceKind.TMDB
    assert item.media_kind is MediaKind.MOVIE


def test_source_is_stamped_over_adapter_output() -> None:
    item = normalize(
        {"id": "ol-OL1W", "external_id": "OL1W", "media_kind": "book", "source": "tmdb"},
        SourceKind.OPENLIBRARY,
    )
    assert item.source is SourceKind.OPENLIBRARY


def test_genres_become_strings() -> None:
    item = normalize(
        {"id": "x", "external_id": "x", "media_kind": "anime", "genres": ["Action", 7]},
        SourceKind.JIKAN,
    )
    assert item.genres == ["Action", "7"]


def test_payload_uses_wire_names_and_omits_absent_fields() -> None:
    item = normalize(
        {
            "id": "tmdb-550",
            "external_id": "550",
            "media_kind": MediaKind.MOVIE,
            "original_title": "Fight Club",
            "release_date": "1999-10-15",
            "vote_count": 100,
            "director": None,
            "metadata": {"trailerKey": None},
        },
        SourceKind.TMDB,
    )

    payload = item.to_payload()

    assert payload["type"] == "movie"
    assert payload["externalId"] == "550"
    assert payload["originalTitle"] == "Fight Club"
    assert payload["releaseDate"] == "1999-10-15"
    assert payload["voteCount"] == 100
    assert payload["source"] == "tmdb"
    assert payload["genres"] == []
    assert "director" not in payload
    assert payload["metadata"] == {"trailerKey": None}


def test_model_accepts_wire_names() -> None:
    item = CanonicalMediaItem.model_validate(
        {"id": "a", "externalId": "a", "type": "manga", "voteCount": 3}
    )
    assert item.media_kind is MediaKind.MANGA
    assert item.vote_count == 3
    assert item.source is SourceKind.UNKNOWN


def test_year_from_date() -> None:
    assert year_from_date("1999-10-15") == 1999
    assert year_from_date("July 29, 1954") == 1954
    assert year_from_date("May 1954") == 1954
    assert year_from_date("unknown") is None
    assert year_from_date("") is None
    assert year_from_date(None) is None
    assert year_from_date(1999) is None
