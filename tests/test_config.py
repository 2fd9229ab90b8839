"""Unit tests for Settings validation."""
import pytest
from pydantic import ValidationError

from ghostmatch.config import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.STORAGE_BACKEND == "file"
        assert settings.BUNDLE_KEY == "oh_bundle"
        assert settings.is_production is False

    def test_backend_normalised(self):
        assert Settings(STORAGE_BACKEND="REDIS").STORAGE_BACKEND == "redis"

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            Settings(STORAGE_BACKEND="localStorage")

    def test_retry_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(SAVE_RETRY_ATTEMPTS=0)

    def test_log_level_validated(self):
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="chatty")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.edu, https://b.edu")
        settings = Settings()
        assert settings.STORAGE_BACKEND == "memory"
        assert settings.allowed_origins_list == ["https://a.edu", "https://b.edu"]
