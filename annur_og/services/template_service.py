"""
OG image HTML template rendering.
Builds the self-contained HTML document that the browser screenshots.
"""
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from ..core.config import (
    DEFAULT_FONT_STYLESHEET_URL,
    DEFAULT_WATERMARK_IMAGE_URL,
    validate_asset_url,
)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
OG_TEMPLATE_PATH = TEMPLATES_DIR / "og_image.html"

DEFAULT_TITLE = "تجربة من كتاب النور"
DEFAULT_VOICE = "مجهول"
DEFAULT_DATE = "2024"
DEFAULT_CONTENT = "تجربة حقيقية من الحياة"

CONTENT_PREVIEW_LENGTH = 120
ELLIPSIS = "…"

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass(frozen=True)
class RenderRequest:
    """Text shown on one OG image."""

    title: str = DEFAULT_TITLE
    voice: str = DEFAULT_VOICE
    date: str = DEFAULT_DATE
    content: str = DEFAULT_CONTENT

    @classmethod
    def from_query(
        cls,
        title: Optional[str] = None,
        voice: Optional[str] = None,
        date: Optional[str] = None,
        content: Optional[str] = None,
    ) -> "RenderRequest":
        """Build a request, falling back to the placeholder text for absent fields."""
        return cls(
            title=DEFAULT_TITLE if title is None else title,
            voice=DEFAULT_VOICE if voice is None else voice,
            date=DEFAULT_DATE if date is None else date,
            content=DEFAULT_CONTENT if content is None else content,
        )


def escape_html(text: str) -> str:
    """Escape HTML-significant characters in user supplied text."""
    return (
        text
        .replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
        .replace("'", '&#39;')
    )


def truncate_content(
    content: str,
    limit: int = CONTENT_PREVIEW_LENGTH,
    always_append_ellipsis: bool = True,
) -> str:
    """
    Cut content to the preview length and add an ellipsis.

    The cut is made at exactly ``limit`` characters with no regard for word
    boundaries. When ``always_append_ellipsis`` is False the ellipsis is only
    added if characters were actually dropped.
    """
    if len(content) > limit:
        return content[:limit] + ELLIPSIS
    if always_append_ellipsis:
        return content + ELLIPSIS
    return content


@lru_cache(maxsize=None)
def load_template(path: Path = OG_TEMPLATE_PATH) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Template not found: {path}")
    return path.read_text(encoding='utf-8')


def fill_template(template_html: str, values: Dict[str, str]) -> str:
    """
    Replace ``{{ name }}`` placeholders in one pass.

    Substituted values are never scanned again, so placeholder-like text in
    user input stays literal. Unknown placeholders are left untouched.
    """
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template_html)


def render_og_html(
    title: str = DEFAULT_TITLE,
    voice: str = DEFAULT_VOICE,
    date: str = DEFAULT_DATE,
    content: str = DEFAULT_CONTENT,
    *,
    preview_length: int = CONTENT_PREVIEW_LENGTH,
    always_append_ellipsis: bool = True,
    font_stylesheet_url: str = DEFAULT_FONT_STYLESHEET_URL,
    watermark_image_url: str = DEFAULT_WATERMARK_IMAGE_URL,
    width: int = 1200,
    height: int = 630,
) -> str:
    """
    Render the OG image HTML document.

    Args:
        title: Main headline, shown large and centered
        voice: Author name, shown top right with the date
        date: Date label
        content: Story text; only a truncated preview is shown

    Returns:
        Complete HTML document for a ``width`` x ``height`` canvas
    """
    preview = truncate_content(content, preview_length, always_append_ellipsis)
    values = {
        "title": escape_html(title),
        "voice": escape_html(voice),
        "date": escape_html(date),
        "content_preview": escape_html(preview),
        "font_stylesheet_url": escape_html(validate_asset_url(font_stylesheet_url)),
        # Goes into <style>, where entities are not decoded
        "watermark_image_url": validate_asset_url(watermark_image_url),
        "width": str(width),
        "height": str(height),
    }
    return fill_template(load_template(), values)
