"""Request helpers shared by the article and editor routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.requests import Request

from typed_notes.errors import InvalidArticleIdError, MissingFieldError, PayloadTooLargeError

if TYPE_CHECKING:
    from starlette.datastructures import FormData
    from starlette.types import Message

    from typed_notes.models.article import Article

_MAX_ARTICLE_ID = 2**64 - 1


def parse_article_id(raw: str) -> int:
    """Parse the decimal ID from a path segment."""
    if not raw.isascii() or not raw.isdigit():
        raise InvalidArticleIdError(raw)
    article_id = int(raw)
    if not 1 <= article_id <= _MAX_ARTICLE_ID:
        raise InvalidArticleIdError(raw)
    return article_id


async def read_form(request: Request, limit: int) -> FormData:
    """Read at most ``limit`` body bytes, then parse them as a form.

    Raises ``PayloadTooLargeError`` before any parsing happens when the
    declared or actual body size is over the limit.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(limit)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(limit)

    sent = False

    async def replay() -> Message:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": bytes(body), "more_body": False}

    return await Request(request.scope, replay).form()


def required_field(form: FormData, name: str) -> str:
    """Return a submitted text field, raising ``MissingFieldError`` when absent."""
    value = form.get(name)
    if not isinstance(value, str):
        raise MissingFieldError(name)
    return value


def is_not_modified(request: Request, article: Article) -> bool:
    """Return True when the client already holds the current revision.

    A request sent with ``Cache-Control: max-age=0`` (a forced reload)
    always gets a fresh response.
    """
    for directive in request.headers.getlist("cache-control"):
        if directive.strip() == "max-age=0":
            return False
    if_none_match = request.headers.get("if-none-match", "")
    return if_none_match.removeprefix("W/") == article.etag
