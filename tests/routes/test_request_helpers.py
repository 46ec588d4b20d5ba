"""Tests for shared request helpers."""

import pytest
from starlette.requests import Request

from typed_notes.errors import InvalidArticleIdError, PayloadTooLargeError
from typed_notes.models.article import Article
from typed_notes.routes.common import is_not_modified, parse_article_id, read_form


def _request(headers: list[tuple[bytes, bytes]], body: bytes = b"") -> Request:
    chunks = [body[i : i + 10] for i in range(0, len(body), 10)] or [b""]

    async def receive():
        chunk = chunks.pop(0)
        return {"type": "http.request", "body": chunk, "more_body": bool(chunks)}

    scope = {"type": "http", "method": "POST", "path": "/", "headers": headers}
    return Request(scope, receive)


@pytest.mark.parametrize(("raw", "expected"), [("1", 1), ("42", 42), ("18446744073709551615", 2**64 - 1)])
def test_parse_article_id_accepts_decimal(raw, expected):
    assert parse_article_id(raw) == expected


@pytest.mark.parametrize("raw", ["", "0", "-1", "abc", "1.5", " 1", "18446744073709551616", "１２"])
def test_parse_article_id_rejects_malformed(raw):
    with pytest.raises(InvalidArticleIdError):
        parse_article_id(raw)


ARTICLE = Article(id=1, salt="s", body="b", revision=3)


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        ([(b"if-none-match", b'"3"')], True),
        ([(b"if-none-match", b'W/"3"')], True),
        ([(b"if-none-match", b'"2"')], False),
        ([], False),
        ([(b"if-none-match", b'"3"'), (b"cache-control", b"max-age=0")], False),
        ([(b"if-none-match", b'"3"'), (b"cache-control", b"no-transform")], True),
    ],
)
def test_is_not_modified(headers, expected):
    assert is_not_modified(_request(headers), ARTICLE) is expected


async def test_read_form_parses_urlencoded_body():
    body = b"newbody=%23+Hello&newpassword=p1"
    request = _request(
        [(b"content-type", b"application/x-www-form-urlencoded")],
        body,
    )
    form = await read_form(request, limit=1000)
    assert form["newbody"] == "# Hello"
    assert form["newpassword"] == "p1"


async def test_read_form_rejects_declared_oversize():
    request = _request([(b"content-length", b"5000")])
    with pytest.raises(PayloadTooLargeError):
        await read_form(request, limit=1000)


async def test_read_form_rejects_streamed_oversize():
    request = _request(
        [(b"content-type", b"application/x-www-form-urlencoded")],
        b"newbody=" + b"x" * 200,
    )
    with pytest.raises(PayloadTooLargeError):
        await read_form(request, limit=100)
