"""
PDF Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated when settings are first loaded.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .dimensions import Length
from .errors import InvalidDimension, UnsupportedPageFormat
from .page_metrics import PageFormat


class PdfServiceSettings(BaseSettings):
    """
    PDF service configuration with validation.

    All settings can be overridden via environment variables of the same
    name (MAX_CONCURRENT_PDFS, PLAYWRIGHT_TIMEOUT, ...).
    """

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # === Rendering ===
    max_concurrent_pdfs: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum concurrent PDF renders (1-20)"
    )
    playwright_timeout: int = Field(
        default=30000,
        ge=1000,
        description="Default Playwright operation timeout in milliseconds"
    )
    playwright_headless: bool = Field(
        default=True,
        description="Launch Chromium headless"
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Maximum size of an uploaded HTML file"
    )
    default_page_size: str = Field(
        default="A4",
        description="Page size used when the caller gives none"
    )

    # === Pagination planning ===
    smart_epsilon_px: float = Field(
        default=2.0,
        ge=0,
        description="Tolerance for measurement noise in pixels"
    )
    continuation_offset: str = Field(
        default="10mm",
        description="Space reserved at the top of a continuation page"
    )
    planner_max_depth: int = Field(
        default=3,
        ge=1,
        le=8,
        description="Granularity levels walked by the planner (Root, Segment, SubSegment)"
    )

    @field_validator("continuation_offset")
    @classmethod
    def validate_continuation_offset(cls, v: str) -> str:
        """Continuation offset must be a parseable length."""
        try:
            Length.parse(v)
        except InvalidDimension as e:
            raise ValueError(str(e))
        return v.strip()

    @field_validator("default_page_size")
    @classmethod
    def validate_default_page_size(cls, v: str) -> str:
        """Default page size must be a known format."""
        try:
            return PageFormat.parse(v).value
        except UnsupportedPageFormat as e:
            raise ValueError(str(e))


@lru_cache()
def get_settings() -> PdfServiceSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for performance.
    """
    return PdfServiceSettings()
