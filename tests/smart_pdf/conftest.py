"""
Pytest fixtures for smart_pdf tests.
"""

import sys
from pathlib import Path

# Make `tests.smart_pdf.fake_layout` importable without installing the tests
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from smart_pdf.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env overrides in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def html_file(tmp_path):
    """A small HTML document on disk."""
    path = tmp_path / "report.html"
    path.write_text("<html><body><h1>Report</h1></body></html>", encoding="utf-8")
    return path
