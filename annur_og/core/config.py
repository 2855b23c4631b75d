"""
Application Settings
====================

Environment configuration for the OG generator using Pydantic Settings.
Values are read from the process environment and an optional ``.env`` file.
"""
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FONT_STYLESHEET_URL = (
    "https://fonts.googleapis.com/css2?family=IBM+Plex+Sans+Arabic:wght@400;600;700&display=swap"
)
DEFAULT_WATERMARK_IMAGE_URL = "https://annur.ai/images/annur-ai.png"

_UNSAFE_URL_CHARS = set("'\"\\()<>")


def validate_asset_url(url: str) -> str:
    """
    Check a remote asset URL before it is placed in the HTML template.

    Only absolute http(s) URLs are accepted. Quotes, backslashes, parentheses,
    angle brackets and whitespace are rejected so the URL can be used as is
    inside a CSS ``url('...')``.
    """
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"Asset URL must be absolute http(s): {url!r}")
    if any(ch in _UNSAFE_URL_CHARS or ch.isspace() for ch in url):
        raise ValueError(f"Asset URL contains characters not allowed in CSS url(): {url!r}")
    return url


class Settings(BaseSettings):
    """OG generator settings with environment variable support."""

    # Application
    APP_NAME: str = Field(default="Annur OG Generator", description="Human readable name")
    SERVICE_NAME: str = Field(default="annur-og-generator", description="Service identifier")
    VERSION: str = Field(default="1.0.0", description="Service version")
    ENVIRONMENT: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    DEBUG: bool = Field(default=False, description="FastAPI debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Server
    HOST: str = Field(default="0.0.0.0", description="Listen host")
    PORT: int = Field(default=3000, description="Listen port")
    CORS_ORIGINS: str = Field(default="*", description="Comma-separated allowed origins")

    # Browser
    PUPPETEER_EXECUTABLE_PATH: Optional[str] = Field(
        default=None, description="Override for the Chromium binary location"
    )
    BROWSER_HEADLESS: bool = Field(default=True, description="Run the browser headless")
    RENDER_TIMEOUT_MS: int = Field(default=30000, description="Content load timeout in milliseconds")
    MAX_CONCURRENT_RENDERS: int = Field(default=4, description="Renders allowed in flight at once")

    # Image
    VIEWPORT_WIDTH: int = Field(default=1200, description="OG image width")
    VIEWPORT_HEIGHT: int = Field(default=630, description="OG image height")
    CACHE_MAX_AGE: int = Field(default=86400, description="Cache-Control max-age in seconds")
    CONTENT_PREVIEW_LENGTH: int = Field(default=120, description="Content snippet length")
    ALWAYS_APPEND_ELLIPSIS: bool = Field(
        default=True, description="Append the ellipsis even when content is not truncated"
    )
    FONT_STYLESHEET_URL: str = Field(default=DEFAULT_FONT_STYLESHEET_URL)
    WATERMARK_IMAGE_URL: str = Field(default=DEFAULT_WATERMARK_IMAGE_URL)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator(
        "RENDER_TIMEOUT_MS",
        "MAX_CONCURRENT_RENDERS",
        "VIEWPORT_WIDTH",
        "VIEWPORT_HEIGHT",
        "CONTENT_PREVIEW_LENGTH",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Value must be a positive integer")
        return v

    @field_validator("FONT_STYLESHEET_URL", "WATERMARK_IMAGE_URL")
    @classmethod
    def validate_asset_urls(cls, v: str) -> str:
        return validate_asset_url(v)

    @field_validator("PUPPETEER_EXECUTABLE_PATH")
    @classmethod
    def empty_path_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def ALL_CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def CACHE_CONTROL(self) -> str:
        return f"public, max-age={self.CACHE_MAX_AGE}"


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
