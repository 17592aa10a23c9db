"""
Page Geometry Calculator.

Knows the physical size of every supported page format and turns a
format, orientation and margins into the printable content height used
by the pagination planner.
"""

import math
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from .dimensions import DimensionResolver
from .errors import UnsupportedPageFormat

if TYPE_CHECKING:
    from .models import Margins


class PageFormat(str, Enum):
    """Named page formats. Values match Playwright's `format` names."""

    LETTER = "Letter"
    LEGAL = "Legal"
    TABLOID = "Tabloid"
    LEDGER = "Ledger"
    A0 = "A0"
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    A4 = "A4"
    A5 = "A5"
    A6 = "A6"
    SINGLE_PAGE = "SinglePage"

    @property
    def is_single_page(self) -> bool:
        return self is PageFormat.SINGLE_PAGE

    @classmethod
    def parse(cls, raw: Optional[str], default: str = "A4") -> "PageFormat":
        """
        Normalize a user supplied page size name.

        Matching is case-insensitive and accepts the Spanish aliases
        (carta, oficio, tabloide) plus several spellings of SinglePage.

        Raises:
            UnsupportedPageFormat: for unknown names
        """
        value = (raw if raw is not None else default).strip().lower()
        page_format = _ALIASES.get(value)
        if page_format is None:
            raise UnsupportedPageFormat(raw if raw is not None else default)
        return page_format


# Physical (width, height) in millimeters, portrait orientation
PAGE_SIZES_MM: Dict[PageFormat, Tuple[float, float]] = {
    PageFormat.LETTER: (215.9, 279.4),
    PageFormat.LEGAL: (215.9, 355.6),
    PageFormat.TABLOID: (279.4, 431.8),
    PageFormat.LEDGER: (431.8, 279.4),
    PageFormat.A0: (841, 1189),
    PageFormat.A1: (594, 841),
    PageFormat.A2: (420, 594),
    PageFormat.A3: (297, 420),
    PageFormat.A4: (210, 297),
    PageFormat.A5: (148, 210),
    PageFormat.A6: (105, 148),
}

_SINGLE_PAGE_ALIASES = (
    "singlepage",
    "single-page",
    "single_page",
    "onepage",
    "one-page",
    "1page",
    "1-pagina",
    "1pagina",
    "una-pagina",
    "unapagina",
)

_ALIASES: Dict[str, PageFormat] = {fmt.value.lower(): fmt for fmt in PAGE_SIZES_MM}
_ALIASES.update({
    "carta": PageFormat.LETTER,
    "oficio": PageFormat.LEGAL,
    "tabloide": PageFormat.TABLOID,
})
_ALIASES.update({alias: PageFormat.SINGLE_PAGE for alias in _SINGLE_PAGE_ALIASES})


class PageMetrics:
    """Computes page geometry in CSS pixels."""

    def __init__(self, resolver: Optional[DimensionResolver] = None):
        self.resolver = resolver or DimensionResolver()

    def page_height_px(self, page_format: PageFormat, landscape: bool = False) -> float:
        """Full physical page height in pixels, honoring orientation."""
        if page_format not in PAGE_SIZES_MM:
            raise UnsupportedPageFormat(
                page_format.value,
                f"{page_format.value} has no fixed physical size",
            )
        width_mm, height_mm = PAGE_SIZES_MM[page_format]
        return self.resolver.mm_to_pixels(width_mm if landscape else height_mm)

    def printable_height_px(
        self,
        page_format: PageFormat,
        landscape: bool,
        margins: "Margins",
    ) -> float:
        """
        Usable content height per page after top and bottom margins.

        Never called for SinglePage, which is sized from the content instead.
        The result is clamped to zero when margins exceed the page.
        """
        page_height = self.page_height_px(page_format, landscape)
        top = self.resolver.to_pixels(margins.top)
        bottom = self.resolver.to_pixels(margins.bottom)
        return max(0.0, page_height - top - bottom)

    def single_page_size_px(
        self,
        content_width_px: float,
        content_height_px: float,
        margins: "Margins",
    ) -> Tuple[int, int]:
        """Page (width, height) that fits the whole content plus margins."""
        horizontal = self.resolver.to_pixels(margins.left) + self.resolver.to_pixels(margins.right)
        vertical = self.resolver.to_pixels(margins.top) + self.resolver.to_pixels(margins.bottom)
        return (
            math.ceil(content_width_px + horizontal),
            math.ceil(content_height_px + vertical),
        )
