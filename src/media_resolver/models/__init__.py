from .media import CanonicalMediaItem, MediaKind, PersistedRecord, SourceKind, year_from_date

__all__ = [
    "CanonicalMediaItem",
    "MediaKind",
    "PersistedRecord",
    "SourceKind",
    "year_from_date",
]
