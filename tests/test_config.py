"""
Unit tests for environment-driven configuration.
"""

from __future__ import annotations

import pytest

import config
from config import get_config

ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_ACCESS_TOKEN",
    "STORAGE_BUCKET",
    "USE_MOCK_DATA",
    "FALLBACK_TO_MOCK",
    "REQUEST_TIMEOUT",
    "APP_TIMEZONE",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.setattr(config, "load_dotenv", lambda **kwargs: False)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestGetConfig:
    def test_defaults(self, clean_env) -> None:
        cfg = get_config()
        assert cfg.supabase_url == ""
        assert cfg.supabase_anon_key is None
        assert cfg.storage_bucket == "submissions"
        assert cfg.default_use_mock is True
        assert cfg.fallback_to_mock is True
        assert cfg.request_timeout == 15.0
        assert cfg.timezone == "Asia/Kolkata"
        assert cfg.log_level == "INFO"
        assert not cfg.is_configured

    def test_backend_urls(self, clean_env) -> None:
        clean_env.setenv("SUPABASE_URL", "https://demo.supabase.co/")
        clean_env.setenv("SUPABASE_ANON_KEY", "anon")
        cfg = get_config()
        assert cfg.is_configured
        assert cfg.rest_url == "https://demo.supabase.co/rest/v1"
        assert cfg.storage_url == "https://demo.supabase.co/storage/v1/object/public"

    def test_blank_values_count_as_unset(self, clean_env) -> None:
        clean_env.setenv("SUPABASE_ANON_KEY", "   ")
        clean_env.setenv("STORAGE_BUCKET", "")
        clean_env.setenv("USE_MOCK_DATA", " ")
        cfg = get_config()
        assert cfg.supabase_anon_key is None
        assert cfg.storage_bucket == "submissions"
        assert cfg.default_use_mock is True

    @pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("YES", True), ("on", True)])
    def test_booleans(self, clean_env, raw, expected) -> None:
        clean_env.setenv("FALLBACK_TO_MOCK", raw)
        assert get_config().fallback_to_mock is expected

    def test_bad_timeout_uses_default(self, clean_env) -> None:
        clean_env.setenv("REQUEST_TIMEOUT", "soon")
        assert get_config().request_timeout == 15.0
        clean_env.setenv("REQUEST_TIMEOUT", "2.5")
        assert get_config().request_timeout == 2.5

    def test_log_level_is_upper_cased(self, clean_env) -> None:
        clean_env.setenv("LOG_LEVEL", "debug")
        assert get_config().log_level == "DEBUG"
