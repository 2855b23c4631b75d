"""
Annur OG Generator
==================

Renders Open Graph preview images (1200x630 PNG) for Annur stories by
rendering an HTML template in headless Chromium through Playwright.
"""

__version__ = "1.0.0"
