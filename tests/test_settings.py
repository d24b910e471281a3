"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from farmreg.core.config import Settings


class TestSettingsFromEnv:
    def test_defaults(self, monkeypatch):
        for name in Settings.model_fields:
            monkeypatch.delenv(name.upper(), raising=False)

        settings = Settings.from_env()

        assert settings.port == 3000
        assert settings.session_timeout_seconds == 300
        assert settings.sweep_interval_seconds == 60
        assert settings.response_deadline_seconds == 25
        assert settings.app_timezone == "Africa/Nairobi"
        assert settings.sentry_dsn is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("SESSION_TIMEOUT_SECONDS", "120")
        monkeypatch.setenv("SWEEP_INTERVAL_SECONDS", "15")

        settings = Settings.from_env()

        assert settings.port == 8080
        assert settings.session_timeout_seconds == 120
        assert settings.sweep_interval_seconds == 15

    def test_blank_values_fall_back_to_defaults(self, monkeypatch):
        monkeypatch.setenv("PORT", "  ")

        assert Settings.from_env().port == 3000

    def test_rejects_non_positive_timeout(self, monkeypatch):
        monkeypatch.setenv("SESSION_TIMEOUT_SECONDS", "0")

        with pytest.raises(ValidationError):
            Settings.from_env()
