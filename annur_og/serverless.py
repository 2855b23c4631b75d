"""
Serverless function entry point.
Each invocation launches its own browser and closes it before responding.
Serves ``GET /api/og-image``.
"""
from .core.config import get_settings
from .main import create_app
from .services.browser_service import EphemeralBrowser

settings = get_settings()

app = create_app(settings, browser_provider=EphemeralBrowser(settings), serverless=True)
