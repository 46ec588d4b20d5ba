"""Editor routes — create new articles and edit existing ones."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse

from typed_notes.routes.common import (
    is_not_modified,
    parse_article_id,
    read_form,
    required_field,
)

router = APIRouter(tags=["editor"])
logger = logging.getLogger(__name__)

EDIT_CACHE_CONTROL = "public, no-cache"


@router.get("/new", response_class=HTMLResponse)
async def new_form(request: Request) -> HTMLResponse:
    """Render the empty article form."""
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "form.html", {"article": None})


@router.post("/new")
async def create_article(request: Request) -> RedirectResponse:
    """Store a new article and redirect to its page."""
    settings = request.app.state.settings
    articles = request.app.state.articles

    form = await read_form(request, settings.app.post_limit)
    article_id = await articles.create(
        required_field(form, "newbody"),
        str(form.get("newpassword", "")),
    )
    return RedirectResponse(f"/a/{article_id}", status_code=303)


@router.get("/edit/")
async def edit_index() -> RedirectResponse:
    return RedirectResponse("/", status_code=301)


@router.get("/edit/{article_id}", response_class=HTMLResponse)
async def edit_form(request: Request, article_id: str) -> Response:
    """Render the edit form, or 304 when the client's copy is current."""
    articles = request.app.state.articles
    templates = request.app.state.templates

    article = await articles.get(parse_article_id(article_id))
    headers = {"Cache-Control": EDIT_CACHE_CONTROL, "ETag": article.etag}
    if is_not_modified(request, article):
        return Response(status_code=304, headers=headers)

    response = templates.TemplateResponse(request, "form.html", {"article": article})
    response.headers.update(headers)
    return response


@router.post("/edit/{article_id}")
async def update_article(request: Request, article_id: str) -> RedirectResponse:
    """Apply an edit and redirect to the article with a cache-busting query."""
    settings = request.app.state.settings
    articles = request.app.state.articles

    parsed_id = parse_article_id(article_id)
    form = await read_form(request, settings.app.post_limit)
    revision = await articles.update(
        parsed_id,
        str(form.get("newpassword", "")),
        required_field(form, "newbody"),
    )
    return RedirectResponse(f"/a/{parsed_id}?etag={revision}", status_code=303)
