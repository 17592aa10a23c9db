"""
PDF Service - FastAPI application for HTML to PDF conversion.

Provides endpoints for converting uploaded HTML files and raw HTML/CSS
to PDF using Playwright/Chromium, with optional smart pagination.
"""

import asyncio
import logging
import tempfile
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from . import __version__
from .config import get_settings
from .converter import HtmlToPdfConverter
from .errors import ValidationError
from .helpers import form_bool, form_string, html_extension, sanitize_base_name, wrap_html
from .models import ConversionOptions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Smart HTML to PDF Service",
    version=__version__,
    description="HTML to PDF conversion with smart pagination using Playwright/Chromium"
)

settings = get_settings()

HTML_MIME_TYPES = {"text/html", "application/xhtml+xml"}

# Semaphore for rate limiting
_pdf_semaphore = asyncio.Semaphore(settings.max_concurrent_pdfs)

# Playwright readiness state
_playwright_ready = False
_playwright_error: Optional[str] = None

_converter: Optional[HtmlToPdfConverter] = None


def get_converter() -> HtmlToPdfConverter:
    """Lazily build the converter from settings."""
    global _converter
    if _converter is None:
        _converter = HtmlToPdfConverter.from_settings(settings)
    return _converter


# ============================================================================
# Startup Event - Validate Playwright
# ============================================================================

@app.on_event("startup")
async def validate_playwright_on_startup():
    """
    Validate Playwright/Chromium is properly installed on startup.

    This ensures the service won't report as healthy if Playwright can't
    actually generate PDFs.
    """
    global _playwright_ready, _playwright_error

    logger.info("PDF Service starting - validating Playwright installation...")

    try:
        from playwright.async_api import async_playwright

        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=settings.playwright_headless)
            page = await browser.new_page()
            await page.set_content("<html><body><h1>Test</h1></body></html>")
            test_pdf = await page.pdf(format="A4")
            await browser.close()

            if len(test_pdf) > 0:
                _playwright_ready = True
                logger.info(f"Playwright validation successful - generated {len(test_pdf)} byte test PDF")
            else:
                _playwright_error = "Test PDF generation returned empty result"
                logger.error(f"Playwright validation failed: {_playwright_error}")

    except Exception as e:
        _playwright_error = str(e)
        logger.error(f"Playwright validation failed: {_playwright_error}")
        logger.error("PDF generation will not work until this is resolved.")


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    timestamp: datetime
    active_renders: int
    max_concurrent: int
    playwright_ready: bool = True
    playwright_error: Optional[str] = None


class RenderPDFRequest(BaseModel):
    """Raw HTML/CSS to PDF request."""
    html: str = Field(..., description="HTML content to render")
    css: Optional[str] = Field(None, description="Additional CSS styles")
    filename: Optional[str] = Field(None, description="Download name without extension")
    pageSize: Optional[str] = Field(None, description="A0-A6, Letter, Legal, Tabloid, Ledger or SinglePage")
    margin: Optional[str] = Field(None, description="Margin applied to every side, e.g. '12mm'")
    marginTop: Optional[str] = None
    marginRight: Optional[str] = None
    marginBottom: Optional[str] = None
    marginLeft: Optional[str] = None
    smart: bool = Field(False, description="Avoid splitting keep-together blocks")
    landscape: bool = False
    preferCssPageSize: bool = False
    scale: Optional[float] = Field(None, description="Render scale (0.1 to 2)")
    waitFor: Optional[float] = Field(None, description="Extra wait before printing, in ms")
    printBackground: bool = Field(True, description="Print background colors/images")


# ============================================================================
# Health Check Endpoint
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns service status, capacity information, and Playwright readiness.
    Returns HTTP 503 if Playwright validation failed on startup.
    """
    active_renders = settings.max_concurrent_pdfs - _pdf_semaphore._value

    if not _playwright_ready:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "timestamp": datetime.utcnow().isoformat(),
                "active_renders": active_renders,
                "max_concurrent": settings.max_concurrent_pdfs,
                "playwright_ready": False,
                "playwright_error": _playwright_error,
                "message": "PDF service is unhealthy - Playwright/Chromium not available"
            }
        )

    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        active_renders=active_renders,
        max_concurrent=settings.max_concurrent_pdfs,
        playwright_ready=True,
        playwright_error=None
    )


# ============================================================================
# PDF Generation
# ============================================================================

async def _convert_html(
    html_bytes: bytes,
    extension: str,
    option_fields: Dict[str, Any],
    download_name: str,
) -> StreamingResponse:
    """
    Write HTML to a temporary directory, convert it and stream the PDF back.

    Raises:
        HTTPException: 400 for invalid options, 500 for rendering failures,
            503 for overload
    """
    if _pdf_semaphore._value <= 0:
        logger.warning("PDF service overloaded, rejecting request")
        raise HTTPException(
            status_code=503,
            detail="Service overloaded. Too many concurrent PDF operations."
        )

    async with _pdf_semaphore:
        with tempfile.TemporaryDirectory(prefix="smart-html-pdf-") as temp_dir:
            input_path = Path(temp_dir) / f"input{extension}"
            output_path = Path(temp_dir) / "output.pdf"
            input_path.write_bytes(html_bytes)

            options = ConversionOptions(
                input=str(input_path),
                output=str(output_path),
                **option_fields
            )

            try:
                result = await get_converter().convert(options)
            except ValidationError as e:
                logger.warning(f"Rejected conversion request: {e}")
                raise HTTPException(status_code=400, detail=str(e))
            except asyncio.TimeoutError:
                logger.error("PDF rendering timed out")
                raise HTTPException(
                    status_code=500,
                    detail=f"Rendering timed out after {settings.playwright_timeout}ms"
                )
            except Exception as e:
                logger.error(f"PDF generation failed: {str(e)}")
                raise HTTPException(
                    status_code=500,
                    detail=f"PDF generation failed: {str(e)}"
                )

    filename = f"{download_name}.pdf"
    logger.info(f"PDF generation completed: {filename}")

    return StreamingResponse(
        BytesIO(result.pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(result.pdf_bytes)),
        }
    )


@app.post("/api/pdf")
async def upload_to_pdf(
    file: Optional[UploadFile] = File(None),
    pageSize: Optional[str] = Form(None),
    margin: Optional[str] = Form(None),
    marginTop: Optional[str] = Form(None),
    marginRight: Optional[str] = Form(None),
    marginBottom: Optional[str] = Form(None),
    marginLeft: Optional[str] = Form(None),
    smart: Optional[str] = Form(None),
    landscape: Optional[str] = Form(None),
    preferCssPageSize: Optional[str] = Form(None),
    scale: Optional[str] = Form(None),
    waitFor: Optional[str] = Form(None),
    printBackground: Optional[str] = Form(None),
):
    """
    Convert an uploaded HTML file to PDF.

    Expects multipart form data with the HTML in the `file` field and
    optional string fields for every conversion option.

    Returns:
        StreamingResponse with PDF binary data named after the upload
    """
    if file is None:
        raise HTTPException(status_code=400, detail='Send an HTML file in the "file" field.')

    filename = file.filename or ""
    extension_ok = Path(filename).suffix.lower() in (".html", ".htm")
    mime_ok = (file.content_type or "").split(";")[0].strip().lower() in HTML_MIME_TYPES
    if not (extension_ok or mime_ok):
        raise HTTPException(status_code=400, detail="Only .html or .htm files are allowed.")

    html_bytes = await file.read()
    if len(html_bytes) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"Upload error: file exceeds {settings.max_upload_bytes} bytes"
        )

    option_fields = {
        "page_size": form_string(pageSize),
        "margin": form_string(margin),
        "margin_top": form_string(marginTop),
        "margin_right": form_string(marginRight),
        "margin_bottom": form_string(marginBottom),
        "margin_left": form_string(marginLeft),
        "smart": form_bool(smart),
        "landscape": form_bool(landscape),
        "prefer_css_page_size": form_bool(preferCssPageSize),
        "scale": form_string(scale),
        "wait_for": form_string(waitFor),
        "print_background": form_bool(printBackground, default=True),
    }

    logger.info(f"Starting upload PDF conversion ({filename}, pageSize={pageSize})")
    return await _convert_html(
        html_bytes,
        html_extension(filename),
        option_fields,
        sanitize_base_name(filename),
    )


@app.post("/render-pdf")
async def render_pdf(request: RenderPDFRequest):
    """
    Convert raw HTML (plus optional CSS) to PDF.

    Returns:
        StreamingResponse with PDF binary data
    """
    if not request.html or not request.html.strip():
        raise HTTPException(status_code=400, detail="HTML content is required")

    option_fields = {
        "page_size": request.pageSize,
        "margin": request.margin,
        "margin_top": request.marginTop,
        "margin_right": request.marginRight,
        "margin_bottom": request.marginBottom,
        "margin_left": request.marginLeft,
        "smart": request.smart,
        "landscape": request.landscape,
        "prefer_css_page_size": request.preferCssPageSize,
        "scale": request.scale,
        "wait_for": request.waitFor,
        "print_background": request.printBackground,
    }

    logger.info(f"Starting HTML PDF render (pageSize={request.pageSize}, smart={request.smart})")
    return await _convert_html(
        wrap_html(request.html, request.css).encode("utf-8"),
        ".html",
        option_fields,
        sanitize_base_name(request.filename or "", fallback="document"),
    )
