"""HTTP routes — article pages, the editor and static assets."""

from typed_notes.routes.articles import router as articles_router
from typed_notes.routes.editor import router as editor_router
from typed_notes.routes.home import router as home_router

__all__ = ["articles_router", "editor_router", "home_router"]
