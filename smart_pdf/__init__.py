"""
Smart HTML to PDF - HTML to PDF conversion with pagination planning.

Converts HTML documents to paginated PDFs using Playwright/Chromium.
In smart mode, keep-together blocks are measured in the live page and
pushed past page boundaries so cards, list items and table rows are
not split mid-block.
"""

__version__ = "0.1.0"
