"""
Annur OG Generator FastAPI application entry point.
Long-running service that renders Open Graph images with one shared
Playwright browser.
"""
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, get_settings
from .routes import og_routes
from .services.browser_service import BrowserManager
from .services.og_service import BrowserProvider, OGService
from .utils.debug import configure_logging, print_step


def create_app(
    settings: Optional[Settings] = None,
    browser_provider: Optional[BrowserProvider] = None,
    serverless: bool = False,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use, the process settings by default
        browser_provider: Source of browsers; a shared ``BrowserManager`` by default
        serverless: Expose only ``/api/og-image`` without health routes

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)
    browser_provider = browser_provider or BrowserManager(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        print_step("OG Service Startup", {
            "service": settings.SERVICE_NAME,
            "port": settings.PORT,
            "serverless": serverless,
        }, "output")
        yield
        # Runs on SIGTERM/SIGINT through the ASGI server's graceful shutdown
        print_step("OG Service Shutdown", "Closing browser", "info")
        await browser_provider.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Open Graph image generation using Playwright",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.browser_provider = browser_provider
    app.state.og_service = OGService(browser_provider, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALL_CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )

    if serverless:
        app.include_router(og_routes.router, prefix="/api")
        return app

    @app.get("/")
    def read_root():
        return {"status": f"{settings.APP_NAME} is online", "service": settings.SERVICE_NAME}

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.SERVICE_NAME}

    app.include_router(og_routes.router)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
