"""Article route — the public, cacheable rendering of a note."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from markupsafe import Markup

from typed_notes.rendering import render_markdown
from typed_notes.routes.common import parse_article_id

router = APIRouter(tags=["articles"])

# Published articles change rarely; edits append ?etag= to bust caches.
ARTICLE_CACHE_CONTROL = "public, max-age=3600"


@router.get("/a/")
async def article_index() -> RedirectResponse:
    return RedirectResponse("/", status_code=301)


@router.get("/a/{article_id}", response_class=HTMLResponse)
async def article_page(request: Request, article_id: str) -> HTMLResponse:
    """Render a stored article as HTML."""
    articles = request.app.state.articles
    templates = request.app.state.templates

    article = await articles.get(parse_article_id(article_id))
    content = Markup(render_markdown(article.body))

    response = templates.TemplateResponse(
        request,
        "a.html",
        {"article": article, "content": content},
    )
    response.headers["Cache-Control"] = ARTICLE_CACHE_CONTROL
    return response
