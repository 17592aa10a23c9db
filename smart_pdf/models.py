"""
Value objects shared by the CLI, the HTTP service and the renderer.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import ValidationError
from .page_metrics import PageFormat


def _normalize_margin(value: str) -> str:
    normalized = str(value).strip()
    if not normalized:
        raise ValidationError("Margins cannot be empty.")
    return normalized


@dataclass(frozen=True)
class Margins:
    """Four-sided page margins as length strings ("12mm", "0.5in", "0")."""

    top: str = "0"
    right: str = "0"
    bottom: str = "0"
    left: str = "0"

    @classmethod
    def from_options(
        cls,
        margin: Optional[str] = None,
        top: Optional[str] = None,
        right: Optional[str] = None,
        bottom: Optional[str] = None,
        left: Optional[str] = None,
    ) -> "Margins":
        """
        Build margins from a shared fallback plus per-side overrides.

        Raises:
            ValidationError: if any resulting side is blank
        """
        fallback = _normalize_margin(margin if margin is not None else "0")
        return cls(
            top=_normalize_margin(top if top is not None else fallback),
            right=_normalize_margin(right if right is not None else fallback),
            bottom=_normalize_margin(bottom if bottom is not None else fallback),
            left=_normalize_margin(left if left is not None else fallback),
        )

    def as_dict(self) -> Dict[str, str]:
        """Margins in the shape Playwright's `page.pdf(margin=...)` expects."""
        return {
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "left": self.left,
        }


@dataclass
class ConversionOptions:
    """
    Raw, unvalidated conversion options as received from a caller.

    Unset fields fall back to the defaults applied by PdfRequestFactory.
    """

    input: str
    output: Optional[str] = None
    page_size: Optional[str] = None
    margin: Optional[str] = None
    margin_top: Optional[str] = None
    margin_right: Optional[str] = None
    margin_bottom: Optional[str] = None
    margin_left: Optional[str] = None
    smart: Optional[bool] = None
    landscape: Optional[bool] = None
    prefer_css_page_size: Optional[bool] = None
    scale: Optional[Union[str, float]] = None
    wait_for: Optional[Union[str, float]] = None
    print_background: Optional[bool] = None


@dataclass(frozen=True)
class PdfRequest:
    """A validated conversion request. Read-only once built."""

    input_path: Path
    output_path: Path
    page_format: PageFormat
    margins: Margins
    smart_mode: bool = False
    landscape: bool = False
    prefer_css_page_size: bool = False
    scale: float = 1.0
    wait_for_ms: float = 0.0
    print_background: bool = True
