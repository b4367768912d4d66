"""Unit tests for client settings."""

import pytest
from pydantic import ValidationError

from civitai_client.config import Settings, get_settings


def make(**kwargs):
    return Settings(_env_file=None, **kwargs)


class TestDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CIVITAI_API_KEY", raising=False)
        monkeypatch.delenv("CIVITAI_BASE_URL", raising=False)
        settings = make()
        assert settings.base_url == "https://civitai.com"
        assert settings.orchestration_base_url == "https://orchestration.civitai.com"
        assert settings.api_version == "v1"
        assert settings.timeout_seconds == 30
        assert settings.api_key is None

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CIVITAI_API_KEY", "secret")
        monkeypatch.setenv("CIVITAI_TIMEOUT_SECONDS", "45")
        settings = make()
        assert settings.api_key == "secret"
        assert settings.timeout_seconds == 45

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestValidation:
    def test_trailing_slash_stripped(self):
        assert make(base_url="https://civitai.test/").base_url == "https://civitai.test"

    @pytest.mark.parametrize("url", ["civitai.com", "ftp://civitai.com", ""])
    def test_invalid_url(self, url):
        with pytest.raises(ValidationError):
            make(base_url=url)

    @pytest.mark.parametrize("timeout", [0, 301])
    def test_timeout_bounds(self, timeout):
        with pytest.raises(ValidationError):
            make(timeout_seconds=timeout)

    def test_blank_api_key_is_none(self):
        assert make(api_key="   ").api_key is None

    def test_empty_version_rejected(self):
        with pytest.raises(ValidationError):
            make(api_version=" ")


class TestPaths:
    def test_api_path(self):
        settings = make()
        assert settings.api_path("models") == "/api/v1/models"
        assert settings.api_path("/models/1") == "/api/v1/models/1"

    def test_orchestration_path(self):
        assert make().orchestration_path("coverage") == "/v1/consumer/coverage"

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            make().api_path("")
