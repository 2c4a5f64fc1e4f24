"""
Unit Tests for settings, errors and logging setup.
"""

import pytest
import structlog

from jamb_estimate.config.errors import (
    ErrorCode,
    EstimateError,
    PricingGatewayError,
    ValidationError,
)
from jamb_estimate.config.settings import Settings
from jamb_estimate.utils.logging_config import configure_logging


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("PRICING_MAX_ATTEMPTS", "SESSION_BACKEND", "SUPPORTED_COUNTRIES", "HTTP_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings()
        assert settings.pricing_max_attempts == 3
        assert settings.http_timeout_seconds == 30
        assert settings.session_backend == "memory"
        assert settings.supported_countries == ["United States"]
        assert not settings.uses_firestore_sessions
        settings.validate()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PRICING_API_BASE_URL", "https://pricing.example.com")
        monkeypatch.setenv("SESSION_BACKEND", "Firestore")
        monkeypatch.setenv("SUPPORTED_COUNTRIES", "United States, Canada ,")
        settings = Settings()
        assert settings.pricing_api_base_url == "https://pricing.example.com"
        assert settings.uses_firestore_sessions
        assert settings.supported_countries == ["United States", "Canada"]

    @pytest.mark.parametrize(
        "name,value",
        [
            ("HTTP_TIMEOUT_SECONDS", "0"),
            ("PRICING_MAX_ATTEMPTS", "0"),
            ("SESSION_BACKEND", "redis"),
        ],
    )
    def test_validate_rejects_bad_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError):
            Settings().validate()


class TestErrors:
    """Tests for structured errors."""

    def test_to_dict(self):
        error = EstimateError(ErrorCode.MISSING_FIELD, "Address is required", {"field": "address"})
        assert error.to_dict() == {
            "code": "MISSING_FIELD",
            "message": "Address is required",
            "details": {"field": "address"},
        }

    def test_validation_error_records_field(self):
        error = ValidationError("bad quantity", field="quantity")
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.details == {"field": "quantity"}

    def test_pricing_error_details(self):
        error = PricingGatewayError(ErrorCode.PRICING_TIMEOUT, "timed out", work_code="4.1.1")
        assert error.details["work_code"] == "4.1.1"
        assert "PRICING_TIMEOUT" in repr(error)


class TestLogging:
    """Tests for structlog configuration."""

    def test_configure_logging_sets_level(self):
        configure_logging("WARNING")
        assert structlog.is_configured()
        structlog.reset_defaults()

    def test_exported_from_utils(self):
        from jamb_estimate import utils

        assert utils.configure_logging is configure_logging
        assert "configure_logging" in utils.__all__

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("VERBOSE")
        assert structlog.is_configured()
        structlog.reset_defaults()
