"""
Error taxonomy for the PDF service.

Setup errors (validation, dimensions, page formats) are raised before any
browser session is opened. Rendering errors wrap Playwright failures.
Pagination planning never raises.
"""

from typing import Optional


class PdfServiceError(Exception):
    """Base class for all service errors."""


class ValidationError(PdfServiceError):
    """A conversion request failed validation."""


class InvalidDimension(ValidationError):
    """A length string could not be parsed into pixels."""

    def __init__(self, raw: str, message: Optional[str] = None):
        self.raw = raw
        super().__init__(
            message or f'Invalid dimension: "{raw}". Use px, mm, cm or in.'
        )


class UnsupportedPageFormat(ValidationError):
    """A page size name is not one of the known formats."""

    def __init__(self, raw: str, message: Optional[str] = None):
        self.raw = raw
        super().__init__(
            message
            or (
                f'Unsupported page size "{raw}". Use one of: A0, A1, A2, A3, A4, '
                "A5, A6, Letter (Carta), Legal (Oficio), Tabloid, Ledger or SinglePage."
            )
        )


class RenderError(PdfServiceError):
    """The browser failed to produce a PDF."""
