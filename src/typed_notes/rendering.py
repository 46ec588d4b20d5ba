"""Markdown to HTML rendering for article pages."""

from __future__ import annotations

import markdown
from markdown.extensions import Extension


class EscapeHtmlExtension(Extension):
    """Treat raw HTML in the source as text so it comes out escaped."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802
        md.preprocessors.deregister("html_block", strict=False)
        md.inlinePatterns.deregister("html", strict=False)


def _extensions() -> list[str | Extension]:
    # Must come after "extra", whose md_in_html re-registers the html_block preprocessor.
    return ["extra", "sane_lists", EscapeHtmlExtension()]


def render_markdown(text: str) -> str:
    """Render an article body. Raw HTML in the source is escaped."""
    return markdown.markdown(text, extensions=_extensions(), output_format="html")
