"""
Open Graph (OG) Image Generation Routes.
Generates dynamic social media preview images for Annur stories.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from ..services.og_service import OGService
from ..services.template_service import RenderRequest
from ..utils.debug import print_step

router = APIRouter(tags=["og"])

GENERATION_FAILED = {"error": "Failed to generate image"}


def get_og_service(request: Request) -> OGService:
    return request.app.state.og_service


@router.get("/og-image")
async def generate_og_image(
    title: Optional[str] = Query(None, description="Story title"),
    voice: Optional[str] = Query(None, description="Author name"),
    date: Optional[str] = Query(None, description="Date label"),
    content: Optional[str] = Query(None, description="Story text, truncated for the preview"),
    og_service: OGService = Depends(get_og_service),
):
    """
    Generate the Open Graph image for a story.

    Absent parameters fall back to placeholder Arabic text.

    Returns:
        PNG image (1200x630) with a one day public Cache-Control header,
        or a JSON error body with status 500
    """
    render_request = RenderRequest.from_query(title, voice, date, content)
    print_step("OG Image Request", {
        "title": render_request.title,
        "voice": render_request.voice,
        "date": render_request.date,
        "content_length": len(render_request.content),
    }, "input")

    try:
        image_bytes = await og_service.generate_image(render_request)
    except Exception as e:
        print_step("OG Image Generation Failed", str(e), "error")
        return JSONResponse(status_code=500, content=GENERATION_FAILED)

    return Response(
        content=image_bytes,
        media_type="image/png",
        headers={
            "Cache-Control": og_service.settings.CACHE_CONTROL,
            "Content-Disposition": "inline; filename=og-image.png"
        }
    )
