"""Tests for configuration and settings functionality."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from media_resolver.config.settings import (
    Settings,
    SettingsError,
    SettingsLoadResult,
    _collect_env_overrides,
    _determine_config_path,
    _flatten_toml,
    load_settings,
)


class TestSettings:
    """Test Settings model functionality."""

    def test_settings_default_values(self):
        settings = Settings()

        assert settings.tmdb_api_key is None
        assert settings.tmdb_base_url == "https://api.themoviedb.org/3"
        assert settings.tmdb_image_base_url == "https://image.tmdb.org/t/p"
        assert settings.openlibrary_base_url == "https://openlibrary.org"
        assert settings.jikan_base_url == "https://api.jikan.moe/v4"
        assert settings.http_timeout == 10.0
        assert settings.http_retries == 2
        assert settings.rate_limit_budget == 10
        assert settings.rate_limit_window == 60.0
        assert settings.supabase_url is None
        assert settings.server_port == 8092
        assert settings.has_item_store is False

    def test_settings_with_aliases(self):
        settings = Settings(
            TMDB_API_KEY="tmdb-key",
            SUPABASE_URL="https://project.supabase.co",
            SUPABASE_KEY="anon-key",
            RATE_LIMIT_BUDGET=3,
        )

        assert settings.tmdb_api_key == "tmdb-key"
        assert settings.rate_limit_budget == 3
        assert settings.has_item_store is True

    def test_settings_strip_whitespace(self):
        settings = Settings(tmdb_api_key="  padded  ")
        assert settings.tmdb_api_key == "padded"

    def test_settings_extra_fields_ignored(self):
        settings = Settings(tmdb_api_key="key", unknown_field="ignored")

        assert settings.tmdb_api_key == "key"
        assert not hasattr(settings, "unknown_field")

    def test_settings_reject_zero_budget(self):
        with pytest.raises(ValueError):
            Settings(rate_limit_budget=0)

    def test_item_store_needs_url_and_key(self):
        assert Settings(supabase_url="https://project.supabase.co").has_item_store is False
        assert Settings(supabase_key="key").has_item_store is False


class TestDetermineConfigPath:
    def test_explicit_path_takes_precedence(self):
        explicit_path = Path("/custom/config.toml")
        assert _determine_config_path(explicit_path) == explicit_path

    def test_path_from_env(self):
        with patch.dict(os.environ, {"MEDIA_RESOLVER_CONFIG": "/env/config.toml"}):
            result = _determine_config_path(None)
            assert result == Path("/env/config.toml").expanduser().resolve()

    def test_default_path_when_present(self):
        with patch.dict(os.environ, {}, clear=True), patch(
            "pathlib.Path.exists", return_value=True
        ):
            result = _determine_config_path(None)
            assert result == Path.home() / ".config" / "media-resolver" / "config.toml"

    def test_default_path_missing(self):
        with patch.dict(os.environ, {}, clear=True), patch(
            "pathlib.Path.exists", return_value=False
        ):
            assert _determine_config_path(None) is None


class TestFlattenToml:
    def test_flatten_empty(self):
        assert _flatten_toml({}) == {}

    def test_flatten_sections(self):
        toml_data = {
            "tmdb": {"api_key": "tmdb-key", "base_url": "http://tmdb.local"},
            "http": {"timeout": 5, "retries": 3},
            "rate_limit": {"budget": 20, "window": 30},
            "store": {"url": "https://project.supabase.co", "key": "anon"},
            "server": {"port": 9000},
            "ignored_section": {"some_field": "ignored"},
        }

        assert _flatten_toml(toml_data) == {
            "tmdb_api_key": "tmdb-key",
            "tmdb_base_url": "http://tmdb.local",
            "http_timeout": 5,
            "http_retries": 3,
            "rate_limit_budget": 20,
            "rate_limit_window": 30,
            "supabase_url": "https://project.supabase.co",
            "supabase_key": "anon",
            "server_port": 9000,
        }

    def test_flatten_ignores_non_table_sections(self):
        assert _flatten_toml({"tmdb": "not-a-table"}) == {}


class TestCollectEnvOverrides:
    def test_empty_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _collect_env_overrides() == {}

    def test_typed_values(self):
        env_vars = {
            "TMDB_API_KEY": "tmdb-key",
            "HTTP_TIMEOUT": "2.5",
            "HTTP_RETRIES": "4",
            "RATE_LIMIT_BUDGET": "15",
            "MEDIA_RESOLVER_PORT": "9100",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            assert _collect_env_overrides() == {
                "tmdb_api_key": "tmdb-key",
                "http_timeout": 2.5,
                "http_retries": 4,
                "rate_limit_budget": 15,
                "server_port": 9100,
            }


class TestLoadSettings:
    def test_env_overrides_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            '[tmdb]\napi_key = "from-file"\n\n[rate_limit]\nbudget = 5\n',
            encoding="utf-8",
        )

        with patch.dict(os.environ, {"TMDB_API_KEY": "from-env"}, clear=True):
            result = load_settings(config_file, load_env=False)

        assert isinstance(result, SettingsLoadResult)
        assert result.source_path == config_file
        assert result.settings.tmdb_api_key == "from-env"
        assert result.settings.rate_limit_budget == 5

    def test_missing_file_uses_defaults(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            result = load_settings(tmp_path / "absent.toml", load_env=False)

        assert result.settings.tmdb_api_key is None
        assert result.settings.http_retries == 2

    def test_invalid_env_value(self):
        with patch.dict(os.environ, {"HTTP_RETRIES": "many"}, clear=True):
            with pytest.raises(SettingsError, match="Invalid environment override"):
                load_settings(Path("/nonexistent/config.toml"), load_env=False)

    def test_validation_error_is_wrapped(self):
        with patch.dict(os.environ, {"HTTP_TIMEOUT": "0"}, clear=True):
            with pytest.raises(SettingsError):
                load_settings(Path("/nonexistent/config.toml"), load_env=False)
