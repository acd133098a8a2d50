"""Error taxonomy shared by the router, adapters, fallback path and HTTP boundary."""

from __future__ import annotations

from typing import Any


class MediaResolverError(RuntimeError):
    """Base class for every failure the resolver reports to callers.

    ``code`` and ``status_code`` drive the JSON error envelope emitted by the
    HTTP boundary and the CLI.
    """

    code: str = "API_ERROR"
    status_code: int = 500

    def to_error_body(self) -> dict[str, Any]:
        return error_body(self.code, str(self))


class InputValidationError(MediaResolverError):
    """Raised for malformed or missing request input. Never reaches an adapter."""

    status_code = 400

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class UnsupportedIdentifierFormat(MediaResolverError):
    """Identifier is neither a record key nor a known source-tagged key."""

    status_code = 400


class KindSourceMismatch(MediaResolverError):
    """Identifier prefix names a source that does not serve the requested kind."""

    status_code = 400


class RateLimitExceeded(MediaResolverError):
    """The per-source request budget for the current window is spent."""

    status_code = 429

    def __init__(self, source: str, message: str | None = None) -> None:
        super().__init__(message or f"Rate limit exceeded for {source} API")
        self.source = source


class ConfigurationMissing(MediaResolverError):
    """A required credential or collaborator is not configured."""

    status_code = 500


class ItemNotFound(MediaResolverError):
    """The upstream catalog answered the primary request with not-found."""

    code = "NOT_FOUND"
    status_code = 404


class UpstreamError(MediaResolverError):
    """The upstream catalog failed, timed out or returned an unusable payload."""

    status_code = 500

    def __init__(self, message: str, *, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class RecordNotFound(MediaResolverError):
    """The item store holds no record for the requested key and kind."""

    code = "NOT_FOUND"
    status_code = 404


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"success": False, "error": {"code": code, "message": message}}


def internal_error_body() -> dict[str, Any]:
    return error_body("INTERNAL_ERROR", "Failed to fetch media details")


__all__ = [
    "ConfigurationMissing",
    "InputValidationError",
    "ItemNotFound",
    "KindSourceMismatch",
    "MediaResolverError",
    "RateLimitExceeded",
    "RecordNotFound",
    "UnsupportedIdentifierFormat",
    "UpstreamError",
    "error_body",
    "internal_error_body",
]
