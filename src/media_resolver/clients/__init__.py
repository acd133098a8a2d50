from .base import CatalogClient
from .jikan import JikanClient
from .openlibrary import OpenLibraryClient
from .tmdb import TMDBClient

__all__ = ["CatalogClient", "JikanClient", "OpenLibraryClient", "TMDBClient"]
