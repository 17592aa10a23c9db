"""
Playwright PDF renderer.

Loads an HTML file in headless Chromium, optionally runs smart pagination
planning, and prints the page to PDF.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from .errors import RenderError
from .models import Margins, PdfRequest
from .page_metrics import PageMetrics
from .planner import PaginationPlanner, PlannerConfig, PlanSummary
from .playwright_provider import PlaywrightMeasurementProvider

logger = logging.getLogger(__name__)

_CONTENT_EXTENT_JS = """
() => {
  const doc = document.documentElement;
  const body = document.body;
  const width = Math.max(
    doc.scrollWidth, doc.offsetWidth, doc.clientWidth,
    body ? body.scrollWidth : 0, body ? body.offsetWidth : 0, body ? body.clientWidth : 0
  );
  const height = Math.max(
    doc.scrollHeight, doc.offsetHeight, doc.clientHeight,
    body ? body.scrollHeight : 0, body ? body.offsetHeight : 0, body ? body.clientHeight : 0
  );
  return { width, height };
}
"""

_FONTS_READY_JS = """
async () => {
  if (document.fonts && document.fonts.ready) {
    await document.fonts.ready;
  }
}
"""


class PlaywrightPdfRenderer:
    """
    Renders a PdfRequest to PDF bytes with Chromium.

    One browser is launched per request and always closed afterwards, so
    requests never share a page or its layout state.
    """

    def __init__(
        self,
        page_metrics: Optional[PageMetrics] = None,
        planner_config: Optional[PlannerConfig] = None,
        headless: bool = True,
        timeout_ms: int = 30000,
    ):
        self.page_metrics = page_metrics or PageMetrics()
        self.planner_config = planner_config or PlannerConfig()
        self.headless = headless
        self.timeout_ms = timeout_ms

    async def render(self, request: PdfRequest) -> bytes:
        """
        Render `request.input_path` and write the PDF to `request.output_path`.

        Returns:
            The PDF bytes

        Raises:
            RenderError: when Chromium fails to load or print the page
            asyncio.TimeoutError: passed through for callers to report
        """
        # Import here to avoid loading Playwright until a render is needed
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError
        from playwright.async_api import async_playwright

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.headless)
                try:
                    page = await browser.new_page()
                    page.set_default_timeout(self.timeout_ms)

                    await page.goto(request.input_path.as_uri(), wait_until="domcontentloaded")
                    await page.wait_for_load_state("networkidle")
                    await page.emulate_media(media="print")
                    await page.evaluate(_FONTS_READY_JS)

                    if request.wait_for_ms > 0:
                        await page.wait_for_timeout(request.wait_for_ms)

                    if request.smart_mode and not request.page_format.is_single_page:
                        await self.optimize_layout(page, request)

                    if request.page_format.is_single_page:
                        options = await self.build_single_page_options(page, request)
                    else:
                        options = self.build_standard_options(request)

                    pdf_bytes = await page.pdf(**options)
                finally:
                    await browser.close()
        except (RenderError, asyncio.TimeoutError):
            raise
        except PlaywrightTimeoutError as e:
            raise asyncio.TimeoutError(str(e)) from e
        except Exception as e:
            raise RenderError(f"Rendering failed: {e}") from e

        logger.info(f"Rendered {len(pdf_bytes)} byte PDF to {request.output_path}")
        return pdf_bytes

    async def optimize_layout(self, page, request: PdfRequest) -> PlanSummary:
        """Run smart pagination planning against the live page."""
        printable_height_px = self.page_metrics.printable_height_px(
            request.page_format,
            request.landscape,
            request.margins,
        )
        planner = PaginationPlanner(
            PlaywrightMeasurementProvider(page),
            config=self.planner_config,
        )
        return await planner.plan(printable_height_px)

    def build_standard_options(self, request: PdfRequest) -> Dict[str, Any]:
        return {
            "path": str(request.output_path),
            "format": request.page_format.value,
            "landscape": request.landscape,
            "print_background": request.print_background,
            "prefer_css_page_size": request.prefer_css_page_size,
            "scale": request.scale,
            "margin": request.margins.as_dict(),
        }

    async def build_single_page_options(self, page, request: PdfRequest) -> Dict[str, Any]:
        """Size one page to the full content extent plus margins."""
        width_px, height_px = await self.measure_full_content(page, request.margins)
        return {
            "path": str(request.output_path),
            "width": f"{width_px}px",
            "height": f"{height_px}px",
            "landscape": False,
            "print_background": request.print_background,
            "prefer_css_page_size": False,
            "scale": request.scale,
            "margin": request.margins.as_dict(),
        }

    async def measure_full_content(self, page, margins: Margins):
        extent = await page.evaluate(_CONTENT_EXTENT_JS)
        return self.page_metrics.single_page_size_px(
            float(extent["width"]),
            float(extent["height"]),
            margins,
        )
