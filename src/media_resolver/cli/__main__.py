from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import typer

from media_resolver import __version__
from media_resolver.config import SettingsError, SettingsLoadResult, load_settings
from media_resolver.errors import MediaResolverError, internal_error_body
from media_resolver.services.resolver import build_media_service, validate_request

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    help="Resolve media details from TMDB, Open Library and Jikan into one schema.",
)


@app.callback()
def _cli_entry(ctx: typer.Context) -> None:
    """Entrypoint for the media-resolver CLI."""
    ctx.obj = {} if ctx.obj is None else ctx.obj


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


@app.command()
def resolve(
    media_type: str = typer.Argument(..., help="movie, tv, book, anime or manga."),
    identifier: str = typer.Argument(..., help="Record key or source-tagged id (e.g. tmdb-550)."),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Resolve one media item and print the JSON envelope."""
    if debug:
        _setup_logging(logging.DEBUG)

    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=1)

    body, status = asyncio.run(_run_resolve(load_result, media_type, identifier))
    typer.echo(json.dumps(body, indent=2, ensure_ascii=False))
    if status != 200:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Bind address (defaults to settings)."),
    port: int | None = typer.Option(None, help="Port (defaults to settings)."),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from media_resolver.api.app import create_app

    _setup_logging(logging.DEBUG if debug else logging.INFO)

    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=1)

    settings = load_result.settings
    final_host = host if host is not None else settings.server_host
    final_port = port if port is not None else settings.server_port

    typer.secho(
        f"Serving media detail API on http://{final_host}:{final_port}",
        fg=typer.colors.CYAN,
    )
    uvicorn.run(
        create_app(settings=settings),
        host=final_host,
        port=final_port,
        log_level="debug" if debug else "info",
    )


async def _run_resolve(
    load_result: SettingsLoadResult,
    media_type: str,
    identifier: str,
) -> tuple[dict[str, Any], int]:
    try:
        media_kind = validate_request(media_type, identifier)
    except MediaResolverError as exc:
        return exc.to_error_body(), exc.status_code

    service = build_media_service(load_result.settings)
    try:
        item = await service.resolve(media_kind, identifier)
    except MediaResolverError as exc:
        return exc.to_error_body(), exc.status_code
    except Exception:
        logger.exception("Failed to resolve %s/%s", media_type, identifier)
        return internal_error_body(), 500
    finally:
        await service.close()

    return {"success": True, "media": item.to_payload()}, 200


def _safe_load_settings() -> SettingsLoadResult | None:
    try:
        return load_settings()
    except SettingsError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        return None


def _setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        format="%(message)s",
        level=level,
        force=True,
    )


if __name__ == "__main__":
    app()
