"""
Helper functions for the HTTP surface.

Coerce multipart form values and build safe download names.
"""

import re
from pathlib import PurePath
from typing import Optional

_TRUE_VALUES = {"true", "1", "yes", "on", "si"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def form_string(value) -> Optional[str]:
    """
    Trimmed string value of a form field, or None when absent or blank.

    Example:
        >>> form_string("  12mm ")
        "12mm"
    """
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def form_bool(value, default: Optional[bool] = None) -> Optional[bool]:
    """
    Parse a boolean form field.

    Accepts true/1/yes/on/si and false/0/no/off (case-insensitive).
    Anything else yields `default`.
    """
    if not isinstance(value, str):
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def sanitize_base_name(filename: str, fallback: str = "documento") -> str:
    """
    Base name of an uploaded file, safe for a Content-Disposition header.

    Drops directories and the extension, then replaces anything outside
    [a-zA-Z0-9-_] with underscores.

    Example:
        >>> sanitize_base_name("Quarterly report (v2).html")
        "Quarterly_report__v2_"
    """
    stem = PurePath(filename or "").stem
    cleaned = re.sub(r"[^a-zA-Z0-9\-_]", "_", stem)
    return cleaned or fallback


def html_extension(filename: str) -> str:
    """`.htm` for .htm uploads, `.html` for everything else."""
    return ".htm" if PurePath(filename or "").suffix.lower() == ".htm" else ".html"


def wrap_html(html: str, css: Optional[str] = None) -> str:
    """Wrap an HTML fragment in a document carrying extra CSS."""
    if not css:
        return html
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>{css}</style>
</head>
<body>
    {html}
</body>
</html>
"""
