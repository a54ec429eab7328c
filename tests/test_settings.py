"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from finhealth.config import (
    AppSettings,
    GeminiSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


class TestGeminiSettings:
    """Tests for the advisor credentials."""

    def test_defaults_without_key(self):
        """Test that a missing key is not an error."""
        settings = GeminiSettings()
        assert settings.api_key is None
        assert settings.is_configured is False
        assert settings.model_name == "gemini-1.5-flash"

    def test_key_from_prefixed_env(self, monkeypatch):
        """Test GEMINI_API_KEY."""
        monkeypatch.setenv("GEMINI_API_KEY", "abc123")
        settings = GeminiSettings()
        assert settings.api_key == "abc123"
        assert settings.is_configured is True

    def test_key_from_plain_env(self, monkeypatch):
        """Test the bare API_KEY fallback."""
        monkeypatch.setenv("API_KEY", "plain-key")
        assert GeminiSettings().api_key == "plain-key"

    def test_blank_key_is_not_configured(self, monkeypatch):
        """Test that whitespace does not count as a key."""
        monkeypatch.setenv("GEMINI_API_KEY", "   ")
        assert GeminiSettings().is_configured is False

    def test_model_name_from_env(self, monkeypatch):
        """Test overriding the model."""
        monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-2.0-flash")
        assert GeminiSettings().model_name == "gemini-2.0-flash"

    def test_temperature_bounds(self):
        """Test that out-of-range temperature is rejected."""
        with pytest.raises(ValidationError):
            GeminiSettings(temperature=1.5)


class TestStorageSettings:
    """Tests for the storage location."""

    def test_defaults(self):
        """Test the default key and backend."""
        settings = StorageSettings()
        assert settings.backend == "file"
        assert settings.data_dir == ".finhealth"
        assert settings.state_key == "finhealth_pro_data_v1"

    def test_backend_from_env(self, monkeypatch):
        """Test selecting the memory backend."""
        monkeypatch.setenv("FINHEALTH_STORAGE_BACKEND", "memory")
        assert StorageSettings().backend == "memory"

    def test_state_key_from_env(self, monkeypatch):
        """Test a custom key made of safe characters."""
        monkeypatch.setenv("FINHEALTH_STORAGE_STATE_KEY", "finhealth-pro.v2")
        assert StorageSettings().state_key == "finhealth-pro.v2"

    def test_unknown_backend_rejected(self, monkeypatch):
        """Test that only file and memory are accepted."""
        monkeypatch.setenv("FINHEALTH_STORAGE_BACKEND", "sqlite")
        with pytest.raises(ValidationError):
            StorageSettings()


class TestAppSettings:
    """Tests for general application settings."""

    def test_log_level_is_normalized(self, monkeypatch):
        """Test lowercase log levels."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        """Test an invalid level."""
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        with pytest.raises(ValidationError):
            AppSettings()


class TestSettingsAggregation:
    """Tests for the root settings and status report."""

    def test_get_settings_is_cached(self):
        """Test that the same instance is returned."""
        assert get_settings() is get_settings()

    def test_validate_all_without_key(self):
        """Test the status report on a fresh install."""
        results = validate_all_settings()
        assert results["gemini"] is False
        assert results["gemini_error"] == "API key not configured"
        assert results["storage"] is True
        assert results["app"] is True

    def test_validate_all_with_key(self, monkeypatch):
        """Test the status report once a key is set."""
        monkeypatch.setenv("GEMINI_API_KEY", "abc123")
        results = validate_all_settings()
        assert results["gemini"] is True
        assert "gemini_error" not in results

    def test_validate_all_reports_broken_section(self, monkeypatch):
        """Test that one bad section does not hide the others."""
        monkeypatch.setenv("FINHEALTH_STORAGE_BACKEND", "sqlite")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results
        assert results["app"] is True

    def test_path_like_state_key_rejected(self, monkeypatch):
        """Test that a key with a path separator is a settings error."""
        monkeypatch.setenv("FINHEALTH_STORAGE_STATE_KEY", "finhealth/v1")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results
