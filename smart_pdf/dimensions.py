"""
Dimension Resolver.

Parses CSS-like length strings ("12mm", "1.5in", "20", "2 cm") and
converts them to pixels at a fixed reference resolution.
"""

import re
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidDimension

CSS_DPI = 96.0
MM_PER_INCH = 25.4

_LENGTH_PATTERN = re.compile(r"^([0-9]*\.?[0-9]+)\s*(px|mm|cm|in)?$", re.IGNORECASE)


class LengthUnit(str, Enum):
    """Units accepted in length strings."""

    PIXEL = "px"
    MILLIMETER = "mm"
    CENTIMETER = "cm"
    INCH = "in"


@dataclass(frozen=True)
class Length:
    """A non-negative magnitude with a unit."""

    magnitude: float
    unit: LengthUnit = LengthUnit.PIXEL

    @classmethod
    def parse(cls, raw: str) -> "Length":
        """
        Parse `<number><unit>?` into a Length.

        The unit is case-insensitive, may be separated from the number by
        whitespace and defaults to pixels.

        Raises:
            InvalidDimension: if the string does not match the grammar
        """
        if not isinstance(raw, str):
            raise InvalidDimension(str(raw))

        match = _LENGTH_PATTERN.match(raw.strip())
        if not match:
            raise InvalidDimension(raw)

        unit = LengthUnit((match.group(2) or "px").lower())
        return cls(magnitude=float(match.group(1)), unit=unit)

    def __str__(self) -> str:
        return f"{self.magnitude:g}{self.unit.value}"


@dataclass(frozen=True)
class DimensionResolver:
    """
    Converts lengths to pixels.

    The resolution constants are fields so tests and callers can pin them
    instead of relying on module globals.
    """

    dpi: float = CSS_DPI
    mm_per_inch: float = MM_PER_INCH

    def to_pixels(self, raw: str) -> float:
        """Parse a length string and return its size in pixels."""
        return self.length_to_pixels(Length.parse(raw))

    def length_to_pixels(self, length: Length) -> float:
        if length.unit is LengthUnit.PIXEL:
            return length.magnitude
        if length.unit is LengthUnit.MILLIMETER:
            return self.mm_to_pixels(length.magnitude)
        if length.unit is LengthUnit.CENTIMETER:
            return self.mm_to_pixels(length.magnitude * 10)
        return length.magnitude * self.dpi

    def mm_to_pixels(self, value_mm: float) -> float:
        return (value_mm / self.mm_per_inch) * self.dpi
