from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

CONFIG_PATH_ENV = "MEDIA_RESOLVER_CONFIG"


class Settings(BaseModel):
    """Application configuration resolved from env vars and optional TOML files."""

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3", alias="TMDB_BASE_URL")
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p", alias="TMDB_IMAGE_BASE_URL"
    )
    openlibrary_base_url: str = Field(
        default="https://openlibrary.org", alias="OPENLIBRARY_BASE_URL"
    )
    openlibrary_covers_url: str = Field(
        default="https://covers.openlibrary.org", alias="OPENLIBRARY_COVERS_URL"
    )
    jikan_base_url: str = Field(default="https://api.jikan.moe/v4", alias="JIKAN_BASE_URL")

    http_timeout: float = Field(default=10.0, gt=0, alias="HTTP_TIMEOUT")
    http_retries: int = Field(default=2, ge=1, alias="HTTP_RETRIES")

    rate_limit_budget: int = Field(default=10, ge=1, alias="RATE_LIMIT_BUDGET")
    rate_limit_window: float = Field(default=60.0, gt=0, alias="RATE_LIMIT_WINDOW")

    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_key: str | None = Field(default=None, alias="SUPABASE_KEY")

    server_host: str = Field(default="127.0.0.1", alias="MEDIA_RESOLVER_HOST")
    server_port: int = Field(default=8092, alias="MEDIA_RESOLVER_PORT")

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    @property
    def has_item_store(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


class SettingsError(RuntimeError):
    """Raised when configuration cannot be resolved."""


@dataclass(frozen=True)
class SettingsLoadResult:
    settings: Settings
    source_path: Path | None


def load_settings(config_path: Path | None = None, *, load_env: bool = True) -> SettingsLoadResult:
    """Load settings from .env files, environment variables, and optional TOML configuration."""

    if load_env:
        load_dotenv()

    resolved_path = _determine_config_path(config_path)
    config_data: dict[str, Any] = {}

    if resolved_path and resolved_path.exists():
        with resolved_path.open("rb") as handle:
            toml_payload = tomllib.load(handle)
        config_data = _flatten_toml(toml_payload)

    try:
        env_data = _collect_env_overrides()
    except ValueError as exc:
        raise SettingsError(f"Invalid environment override: {exc}") from exc
    merged = {**config_data, **env_data}

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as exc:
        raise SettingsError(str(exc)) from exc

    return SettingsLoadResult(settings=settings, source_path=resolved_path)


def _determine_config_path(config_path: Path | None) -> Path | None:
    if config_path:
        return config_path

    env_override = os.getenv(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()

    default_path = Path.home() / ".config" / "media-resolver" / "config.toml"
    return default_path if default_path.exists() else None


# (section, key) -> settings field
_TOML_FIELDS: dict[tuple[str, str], str] = {
    ("tmdb", "api_key"): "tmdb_api_key",
    ("tmdb", "base_url"): "tmdb_base_url",
    ("tmdb", "image_base_url"): "tmdb_image_base_url",
    ("openlibrary", "base_url"): "openlibrary_base_url",
    ("openlibrary", "covers_url"): "openlibrary_covers_url",
    ("jikan", "base_url"): "jikan_base_url",
    ("http", "timeout"): "http_timeout",
    ("http", "retries"): "http_retries",
    ("rate_limit", "budget"): "rate_limit_budget",
    ("rate_limit", "window"): "rate_limit_window",
    ("store", "url"): "supabase_url",
    ("store", "key"): "supabase_key",
    ("server", "host"): "server_host",
    ("server", "port"): "server_port",
}


def _flatten_toml(payload: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for (section, key), field in _TOML_FIELDS.items():
        section_cfg = payload.get(section, {})
        if isinstance(section_cfg, dict) and key in section_cfg:
            result[field] = section_cfg.get(key)
    return result


def _collect_env_overrides() -> dict[str, Any]:
    mapping: dict[str, str] = {
        "TMDB_API_KEY": "tmdb_api_key",
        "TMDB_BASE_URL": "tmdb_base_url",
        "TMDB_IMAGE_BASE_URL": "tmdb_image_base_url",
        "OPENLIBRARY_BASE_URL": "openlibrary_base_url",
        "OPENLIBRARY_COVERS_URL": "openlibrary_covers_url",
        "JIKAN_BASE_URL": "jikan_base_url",
        "HTTP_TIMEOUT": "http_timeout",
        "HTTP_RETRIES": "http_retries",
        "RATE_LIMIT_BUDGET": "rate_limit_budget",
        "RATE_LIMIT_WINDOW": "rate_limit_window",
        "SUPABASE_URL": "supabase_url",
        "SUPABASE_KEY": "supabase_key",
        "MEDIA_RESOLVER_HOST": "server_host",
        "MEDIA_RESOLVER_PORT": "server_port",
    }

    result: dict[str, Any] = {}
    for env_name, field in mapping.items():
        if env_name not in os.environ:
            continue
        value = os.environ[env_name]
        if field in {"http_retries", "rate_limit_budget", "server_port"}:
            result[field] = int(value)
        elif field in {"http_timeout", "rate_limit_window"}:
            result[field] = float(value)
        else:
            result[field] = value
    return result


__all__ = ["Settings", "SettingsError", "SettingsLoadResult", "load_settings"]
