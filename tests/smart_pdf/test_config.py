"""
Unit tests for service settings.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from smart_pdf.config import PdfServiceSettings, get_settings
from smart_pdf.dimensions import DimensionResolver
from smart_pdf.planner import PlannerConfig


class TestPdfServiceSettings:
    """Tests for PdfServiceSettings."""

    def test_defaults(self, monkeypatch):
        for name in (
            "MAX_CONCURRENT_PDFS",
            "PLAYWRIGHT_TIMEOUT",
            "DEFAULT_PAGE_SIZE",
            "CONTINUATION_OFFSET",
            "PLANNER_MAX_DEPTH",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = PdfServiceSettings()

        assert settings.max_concurrent_pdfs == 5
        assert settings.playwright_timeout == 30000
        assert settings.max_upload_bytes == 10 * 1024 * 1024
        assert settings.default_page_size == "A4"
        assert settings.continuation_offset == "10mm"
        assert settings.planner_max_depth == 3

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_CONCURRENT_PDFS", "2")
        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "carta")
        monkeypatch.setenv("CONTINUATION_OFFSET", " 0.5in ")
        monkeypatch.setenv("SMART_EPSILON_PX", "4")

        settings = get_settings()

        assert settings.max_concurrent_pdfs == 2
        assert settings.default_page_size == "Letter"
        assert settings.continuation_offset == "0.5in"
        assert settings.smart_epsilon_px == 4.0

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_invalid_continuation_offset(self):
        with pytest.raises(PydanticValidationError):
            PdfServiceSettings(continuation_offset="soon")

    def test_invalid_default_page_size(self):
        with pytest.raises(PydanticValidationError):
            PdfServiceSettings(default_page_size="B5")

    def test_concurrency_bounds(self):
        with pytest.raises(PydanticValidationError):
            PdfServiceSettings(max_concurrent_pdfs=0)
        with pytest.raises(PydanticValidationError):
            PdfServiceSettings(max_concurrent_pdfs=21)


class TestPlannerConfigFromSettings:
    """Tests for building planner tuning from settings."""

    def test_from_settings(self):
        settings = PdfServiceSettings(
            smart_epsilon_px=1.5,
            continuation_offset="1in",
            planner_max_depth=4,
        )

        config = PlannerConfig.from_settings(settings, DimensionResolver())

        assert config.epsilon_px == 1.5
        assert config.continuation_offset_px == pytest.approx(96.0)
        assert config.max_depth == 4
