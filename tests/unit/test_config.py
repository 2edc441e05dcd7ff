"""
Unit tests for configuration module.
"""

import pytest
from pydantic import ValidationError

from flag_dashboard.config import (
    settings, Settings, FlagsApiSettings, BackendSettings, ObservabilitySettings
)


class TestSettings:
    """Test configuration settings."""

    def test_default_settings(self, monkeypatch):
        """Defaults match the backend the dashboard was written against."""
        monkeypatch.delenv("FLAGS_API_URL", raising=False)
        monkeypatch.delenv("DASHBOARD_PORT", raising=False)

        fresh = Settings(_env_file=None)

        assert fresh.flags_api.base_url == 'http://localhost:3000/flags'
        assert fresh.dashboard_port == 5001
        assert fresh.backend.port == 3000

    def test_global_settings_instance(self):
        """Module-level settings are importable and typed."""
        assert isinstance(settings, Settings)
        assert isinstance(settings.flags_api, FlagsApiSettings)

    def test_environment_variable_override(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("DASHBOARD_PORT", "8080")
        monkeypatch.setenv("FLAGS_API_URL", "http://flags.internal:9000/api/flags/")

        fresh = Settings(_env_file=None)

        assert fresh.dashboard_port == 8080
        assert fresh.flags_api.base_url == 'http://flags.internal:9000/api/flags'

    def test_invalid_dashboard_port(self, monkeypatch):
        monkeypatch.setenv("DASHBOARD_PORT", "70000")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestFlagsApiSettings:
    """Test backend client settings."""

    def test_trailing_slash_stripped(self):
        flags_api = FlagsApiSettings(base_url='http://localhost:3000/flags/')
        assert flags_api.base_url == 'http://localhost:3000/flags'

    def test_url_scheme_required(self):
        with pytest.raises(ValidationError):
            FlagsApiSettings(base_url='localhost:3000/flags')

    def test_timeout_bounds(self):
        with pytest.raises(ValidationError):
            FlagsApiSettings(timeout=0)

        with pytest.raises(ValidationError):
            FlagsApiSettings(timeout=301)

    def test_retries_default_to_single_attempt(self, monkeypatch):
        monkeypatch.delenv("FLAGS_API_MAX_RETRIES", raising=False)
        assert FlagsApiSettings().max_retries == 0

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            FlagsApiSettings(max_retries=-1)


class TestObservabilitySettings:
    """Test observability-specific settings."""

    def test_log_level_normalized(self):
        assert ObservabilitySettings(log_level='debug').log_level == 'DEBUG'

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            ObservabilitySettings(log_level='VERBOSE')

    def test_log_format_values(self):
        assert ObservabilitySettings(log_format='TEXT').log_format == 'text'

        with pytest.raises(ValidationError):
            ObservabilitySettings(log_format='xml')


class TestBackendSettings:
    """Test development backend settings."""

    def test_seed_defaults_from_env(self, monkeypatch):
        monkeypatch.setenv("BACKEND_SEED_DEFAULTS", "false")
        assert BackendSettings().seed_defaults is False

    def test_invalid_port(self):
        with pytest.raises(ValidationError):
            BackendSettings(port=0)
