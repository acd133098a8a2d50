from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from media_resolver import __version__
from media_resolver.errors import (
    InputValidationError,
    MediaResolverError,
    internal_error_body,
)
from media_resolver.services.resolver import MediaDetailService, validate_request

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=3600"

router = APIRouter(prefix="/api")


def get_service(request: Request) -> MediaDetailService:
    return request.app.state.media_service


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/media/{media_type}")
async def media_detail_missing_id(media_type: str) -> JSONResponse:
    return _error_response(InputValidationError("MISSING_PARAMS", "Missing type or id parameter"))


@router.get("/media/{media_type}/{identifier}")
async def media_detail(
    media_type: str,
    identifier: str,
    service: MediaDetailService = Depends(get_service),
) -> JSONResponse:
    try:
        media_kind = validate_request(media_type, identifier)
        item = await service.resolve(media_kind, identifier)
    except MediaResolverError as exc:
        logger.info("Media detail %s/%s failed: %s", media_type, identifier, exc)
        return _error_response(exc)
    except Exception:
        logger.exception("Media detail API error for %s/%s", media_type, identifier)
        return JSONResponse(status_code=500, content=internal_error_body())

    return JSONResponse(
        status_code=200,
        content={"success": True, "media": item.to_payload()},
        headers={"Cache-Control": CACHE_CONTROL},
    )


def _error_response(exc: MediaResolverError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_error_body())


__all__ = ["CACHE_CONTROL", "get_service", "router"]
