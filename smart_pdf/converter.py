"""
HTML to PDF conversion use case shared by the CLI and the HTTP service.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import PdfServiceSettings, get_settings
from .dimensions import DimensionResolver
from .models import ConversionOptions, PdfRequest
from .page_metrics import PageMetrics
from .planner import PlannerConfig
from .renderer import PlaywrightPdfRenderer
from .request_factory import PdfRequestFactory, validate_input_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    request: PdfRequest
    pdf_bytes: bytes


class HtmlToPdfConverter:
    """Validate the input, build the request and render it."""

    def __init__(
        self,
        request_factory: PdfRequestFactory,
        renderer: PlaywrightPdfRenderer,
    ):
        self.request_factory = request_factory
        self.renderer = renderer

    @classmethod
    def from_settings(cls, settings: Optional[PdfServiceSettings] = None) -> "HtmlToPdfConverter":
        """Wire the converter from service settings."""
        settings = settings or get_settings()
        resolver = DimensionResolver()
        renderer = PlaywrightPdfRenderer(
            page_metrics=PageMetrics(resolver),
            planner_config=PlannerConfig.from_settings(settings, resolver),
            headless=settings.playwright_headless,
            timeout_ms=settings.playwright_timeout,
        )
        factory = PdfRequestFactory(resolver, default_page_size=settings.default_page_size)
        return cls(factory, renderer)

    def prepare(self, options: ConversionOptions) -> PdfRequest:
        """
        Run every validation step without touching the browser.

        Raises:
            ValidationError: if the input or any option is invalid
        """
        validate_input_file(options.input)
        return self.request_factory.build(options)

    async def convert(self, options: ConversionOptions) -> ConversionResult:
        """
        Convert an HTML file to PDF.

        Returns:
            ConversionResult with the validated request and the PDF bytes,
            which are also written to `request.output_path`
        """
        request = self.prepare(options)
        logger.info(
            f"Converting {request.input_path.name} "
            f"(format={request.page_format.value}, smart={request.smart_mode})"
        )
        pdf_bytes = await self.renderer.render(request)
        logger.info(f"PDF generated: {request.output_path}")
        return ConversionResult(request=request, pdf_bytes=pdf_bytes)
