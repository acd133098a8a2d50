"""Identifier classification: stored record key vs. source-tagged external key."""

from __future__ import annotations

import re
from dataclasses import dataclass

from media_resolver.errors import KindSourceMismatch, UnsupportedIdentifierFormat
from media_resolver.models import MediaKind, SourceKind

RECORD_KEY_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class _PrefixRule:
    prefix: str
    source: SourceKind
    label: str
    kinds: frozenset[MediaKind]


# Longest prefixes first so "jikan-anime-" never loses to a shorter tag.
_PREFIX_RULES: tuple[_PrefixRule, ...] = (
    _PrefixRule("jikan-anime-", SourceKind.JIKAN, "Jikan anime", frozenset({MediaKind.ANIME})),
    _PrefixRule("jikan-manga-", SourceKind.JIKAN, "Jikan manga", frozenset({MediaKind.MANGA})),
    _PrefixRule("tmdb-", SourceKind.TMDB, "TMDB", frozenset({MediaKind.MOVIE, MediaKind.TV})),
    _PrefixRule("ol-", SourceKind.OPENLIBRARY, "Open Library", frozenset({MediaKind.BOOK})),
)


@dataclass(frozen=True)
class RecordKey:
    """Key of a persisted record; the only identifier shape with a fallback path."""

    key: str
    media_kind: MediaKind


@dataclass(frozen=True)
class SourceKey:
    """Identifier owned by one upstream, with its source prefix stripped."""

    source: SourceKind
    external_id: str
    media_kind: MediaKind
    identifier: str


RoutedIdentifier = RecordKey | SourceKey


def classify(media_kind: MediaKind, identifier: str) -> RoutedIdentifier:
    if RECORD_KEY_PATTERN.match(identifier):
        return RecordKey(key=identifier, media_kind=media_kind)
    return parse_source_key(media_kind, identifier)


def parse_source_key(media_kind: MediaKind, identifier: str) -> SourceKey:
    """Resolve a source-tagged key, checking that its source serves ``media_kind``."""
    for rule in _PREFIX_RULES:
        if not identifier.startswith(rule.prefix):
            continue
        external_id = identifier[len(rule.prefix) :]
        if not external_id:
            break
        if media_kind not in rule.kinds:
            raise KindSourceMismatch(
                f"{rule.label} does not support media type: {media_kind.value}"
            )
        return SourceKey(
            source=rule.source,
            external_id=external_id,
            media_kind=media_kind,
            identifier=identifier,
        )

    raise UnsupportedIdentifierFormat(f"Unsupported ID format: {identifier}")


def source_for_identifier(identifier: str) -> SourceKind:
    """Source implied by an identifier's prefix, ``UNKNOWN`` when untagged."""
    for rule in _PREFIX_RULES:
        if identifier.startswith(rule.prefix):
            return rule.source
    return SourceKind.UNKNOWN


__all__ = [
    "RECORD_KEY_PATTERN",
    "RecordKey",
    "RoutedIdentifier",
    "SourceKey",
    "classify",
    "parse_source_key",
    "source_for_identifier",
]
