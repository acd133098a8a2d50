from .base import MediaSourceAdapter, gather_optional
from .factory import build_adapters, build_rate_limiter
from .jikan import JikanAdapter
from .openlibrary import OpenLibraryAdapter
from .tmdb import TMDBAdapter

__all__ = [
    "JikanAdapter",
    "MediaSourceAdapter",
    "OpenLibraryAdapter",
    "TMDBAdapter",
    "build_adapters",
    "build_rate_limiter",
    "gather_optional",
]
