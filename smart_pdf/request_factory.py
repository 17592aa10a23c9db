"""
Request validation.

Turns raw ConversionOptions into a validated PdfRequest. Every check that
can fail runs here, before a browser is launched.
"""

import logging
import math
from pathlib import Path
from typing import Optional, Union

from .dimensions import DimensionResolver
from .errors import ValidationError
from .models import ConversionOptions, Margins, PdfRequest
from .page_metrics import PageFormat

logger = logging.getLogger(__name__)

HTML_EXTENSIONS = (".html", ".htm")

MIN_SCALE = 0.1
MAX_SCALE = 2.0


def validate_input_file(input_path: Union[str, Path]) -> Path:
    """
    Check the input exists, is a regular file and has an HTML extension.

    Returns:
        The resolved absolute path

    Raises:
        ValidationError: on any failed check
    """
    resolved = Path(input_path).expanduser().resolve()

    if not resolved.exists():
        raise ValidationError(f"Input file does not exist: {resolved}")
    if not resolved.is_file():
        raise ValidationError(f"Input path is not a file: {resolved}")
    if resolved.suffix.lower() not in HTML_EXTENSIONS:
        raise ValidationError("Input file must have a .html or .htm extension.")

    return resolved


def resolve_output_path(input_path: Path, output_path: Optional[str] = None) -> Path:
    """
    Work out where the PDF is written.

    An explicit output gets a `.pdf` suffix appended when missing. Without
    one, the PDF sits next to the input with the same base name.
    """
    if output_path and output_path.strip():
        normalized = output_path if output_path.lower().endswith(".pdf") else f"{output_path}.pdf"
        return Path(normalized).expanduser().resolve()

    return input_path.with_suffix(".pdf").resolve()


class PdfRequestFactory:
    """Builds PdfRequest objects from caller options."""

    def __init__(
        self,
        resolver: Optional[DimensionResolver] = None,
        default_page_size: str = "A4",
    ):
        self.resolver = resolver or DimensionResolver()
        self.default_page_size = default_page_size

    def build(self, options: ConversionOptions) -> PdfRequest:
        """
        Validate options and return an immutable request.

        Raises:
            ValidationError: for bad margins, scale, wait or page size
                (InvalidDimension and UnsupportedPageFormat are subclasses)
        """
        input_path = Path(options.input).expanduser().resolve()
        output_path = resolve_output_path(input_path, options.output)

        page_format = PageFormat.parse(options.page_size, default=self.default_page_size)
        margins = self.build_margins(options)

        scale = self._parse_number(options.scale, 1.0, "scale")
        wait_for_ms = self._parse_number(options.wait_for, 0.0, "wait-for")

        if scale < MIN_SCALE or scale > MAX_SCALE:
            raise ValidationError(f"--scale must be between {MIN_SCALE:g} and {MAX_SCALE:g}.")
        if wait_for_ms < 0:
            raise ValidationError("--wait-for cannot be negative.")

        logger.debug(
            f"Validated request: input={input_path}, format={page_format.value}, "
            f"smart={bool(options.smart)}, landscape={bool(options.landscape)}"
        )

        return PdfRequest(
            input_path=input_path,
            output_path=output_path,
            page_format=page_format,
            margins=margins,
            smart_mode=bool(options.smart),
            landscape=bool(options.landscape),
            prefer_css_page_size=bool(options.prefer_css_page_size),
            scale=scale,
            wait_for_ms=wait_for_ms,
            print_background=True if options.print_background is None else options.print_background,
        )

    def build_margins(self, options: ConversionOptions) -> Margins:
        """Apply the margin fallback and make sure every side parses."""
        margins = Margins.from_options(
            margin=options.margin,
            top=options.margin_top,
            right=options.margin_right,
            bottom=options.margin_bottom,
            left=options.margin_left,
        )
        for side in (margins.top, margins.right, margins.bottom, margins.left):
            self.resolver.to_pixels(side)
        return margins

    @staticmethod
    def _parse_number(
        raw_value: Optional[Union[str, float]],
        default: float,
        label: str,
    ) -> float:
        if raw_value is None:
            return default
        if isinstance(raw_value, bool):
            raise ValidationError(f"--{label} must be numeric.")
        if isinstance(raw_value, (int, float)):
            value = float(raw_value)
        else:
            text = str(raw_value).strip()
            if not text:
                return default
            try:
                value = float(text)
            except ValueError:
                raise ValidationError(f"--{label} must be numeric.")

        # NaN and infinities compare oddly against the range bounds
        if not math.isfinite(value):
            raise ValidationError(f"--{label} must be numeric.")
        return value
