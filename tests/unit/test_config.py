"""Tests for settings and startup validation."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from healthweave.core.config import (
    AppSettings,
    LocalProviderConfig,
    PDFFormattingConfig,
    PersistenceConfig,
    PrimaryProviderConfig,
    SecondaryProviderConfig,
)
from healthweave.core.startup_checks import validate_settings


class TestSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.pdf.page_size == "letter"
        assert settings.local.timeout_seconds == 300.0
        assert settings.primary.timeout_seconds is None
        assert settings.api.port == 4000

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("HEALTHWEAVE_PDF_PAGE_SIZE", "a4")
        monkeypatch.setenv("HEALTHWEAVE_PDF_INCLUDE_APPENDIX", "false")
        config = PDFFormattingConfig()
        assert config.page_size == "a4"
        assert config.include_appendix is False

    def test_secondary_key_from_env(self, monkeypatch):
        monkeypatch.setenv("HEALTHWEAVE_SECONDARY_API_KEY", "sk-env")
        assert SecondaryProviderConfig().api_key == "sk-env"

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            PDFFormattingConfig(margin_points=0)
        with pytest.raises(ValidationError):
            PDFFormattingConfig(page_size="legal")
        with pytest.raises(ValidationError):
            LocalProviderConfig(timeout_seconds=0)


class TestStartupChecks:
    def test_s3_requires_bucket(self):
        settings = AppSettings(persistence=PersistenceConfig(backend="s3", s3_bucket=""))
        with pytest.raises(ValueError, match="S3_BUCKET"):
            validate_settings(settings)

    def test_s3_with_bucket(self):
        validate_settings(AppSettings(persistence=PersistenceConfig(backend="s3", s3_bucket="reports")))

    def test_file_backend_in_container_warns(self, monkeypatch, caplog):
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
        with caplog.at_level(logging.WARNING, logger="healthweave.core.startup_checks"):
            validate_settings(AppSettings(persistence=PersistenceConfig(backend="file")))
        assert any("container" in r.getMessage() for r in caplog.records)

    def test_emulator_without_fallback_warns(self, caplog):
        settings = AppSettings(
            primary=PrimaryProviderConfig(aws_endpoint="http://localhost:4566"),
            secondary=SecondaryProviderConfig(api_key=""),
            local=LocalProviderConfig(enabled=False),
        )
        with caplog.at_level(logging.WARNING, logger="healthweave.core.startup_checks"):
            validate_settings(settings)
        assert any("no fallback is usable" in r.getMessage() for r in caplog.records)

    def test_emulator_in_production_warns(self, caplog):
        settings = AppSettings(
            environment="production",
            primary=PrimaryProviderConfig(aws_endpoint="http://localhost:4566"),
        )
        with caplog.at_level(logging.WARNING, logger="healthweave.core.startup_checks"):
            validate_settings(settings)
        assert any("production" in r.getMessage() for r in caplog.records)
