"""
CLI Entry Point: Convert HTML to PDF with smart pagination

Usage:
    smart-html-pdf --input report.html
    smart-html-pdf --input report.html --output out.pdf --page-size Letter --margin 12mm --smart
    smart-html-pdf --input poster.html --page-size SinglePage
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import get_settings
from .converter import HtmlToPdfConverter
from .errors import ValidationError
from .models import ConversionOptions

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smart-html-pdf",
        description="Convert HTML to PDF with smart pagination."
    )
    parser.add_argument("--input", required=True, help="Input HTML file")
    parser.add_argument("--output", help="Output PDF path (defaults to the input name with .pdf)")
    parser.add_argument(
        "--page-size",
        dest="page_size",
        help="A0-A6 | Letter (Carta) | Legal (Oficio) | Tabloid | Ledger | SinglePage (default: A4)"
    )
    parser.add_argument("--margin", default="0", help="Margin for every side, e.g. 12mm")
    parser.add_argument("--margin-top", dest="margin_top", help="Top margin")
    parser.add_argument("--margin-right", dest="margin_right", help="Right margin")
    parser.add_argument("--margin-bottom", dest="margin_bottom", help="Bottom margin")
    parser.add_argument("--margin-left", dest="margin_left", help="Left margin")
    parser.add_argument(
        "--smart",
        action="store_true",
        help="Avoid splitting cards, list items and table rows across pages"
    )
    parser.add_argument("--landscape", action="store_true", help="Landscape orientation")
    parser.add_argument(
        "--prefer-css-page-size",
        dest="prefer_css_page_size",
        action="store_true",
        help="Honor @page size from the document CSS"
    )
    parser.add_argument("--scale", default="1", help="Render scale (0.1 to 2)")
    parser.add_argument(
        "--wait-for",
        dest="wait_for",
        default="0",
        help="Extra wait in milliseconds before printing"
    )
    parser.add_argument(
        "--no-print-background",
        dest="print_background",
        action="store_false",
        help="Do not print background colors and images"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    return ConversionOptions(
        input=args.input,
        output=args.output,
        page_size=args.page_size,
        margin=args.margin,
        margin_top=args.margin_top,
        margin_right=args.margin_right,
        margin_bottom=args.margin_bottom,
        margin_left=args.margin_left,
        smart=args.smart,
        landscape=args.landscape,
        prefer_css_page_size=args.prefer_css_page_size,
        scale=args.scale,
        wait_for=args.wait_for,
        print_background=args.print_background,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    try:
        converter = HtmlToPdfConverter.from_settings(get_settings())
        result = asyncio.run(converter.convert(options_from_args(args)))
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except Exception as e:
        logger.error(f"Conversion failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(f"PDF generated: {result.request.output_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
