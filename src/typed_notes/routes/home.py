"""Home routes — front page and static assets."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse

router = APIRouter(tags=["home"])

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
STATIC_CACHE_CONTROL = "max-age=604800, public"


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Render the front page with the number of stored articles."""
    templates = request.app.state.templates
    articles = request.app.state.articles
    total = await articles.count()
    return templates.TemplateResponse(request, "index.html", {"count": total})


@router.get("/index.html")
async def index_alias() -> RedirectResponse:
    return RedirectResponse("/", status_code=301)


@router.get("/main.css")
async def stylesheet() -> FileResponse:
    return FileResponse(
        STATIC_DIR / "main.css",
        media_type="text/css",
        headers={"Cache-Control": STATIC_CACHE_CONTROL},
    )


@router.get("/favicon.ico")
async def favicon() -> FileResponse:
    return FileResponse(
        STATIC_DIR / "favicon.ico",
        media_type="image/x-icon",
        headers={"Cache-Control": STATIC_CACHE_CONTROL},
    )
