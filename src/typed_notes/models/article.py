"""Article model — a stored Markdown note as seen above the store."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Article(BaseModel):
    """A decoded article. The body is always plain text here."""

    id: int = Field(ge=1, lt=2**64)
    password_digest: str = ""
    salt: str
    body: str
    revision: int = Field(default=0, ge=0)

    @property
    def abs_path(self) -> str:
        return f"/a/{self.id}"

    @property
    def edit_path(self) -> str:
        return f"/edit/{self.id}"

    @property
    def etag(self) -> str:
        """Validator token derived from the revision counter."""
        return f'"{self.revision}"'

    @property
    def editable(self) -> bool:
        return self.password_digest != ""

    @property
    def title(self) -> str:
        """First Markdown heading of the body, or the ID when there is none."""
        for line in self.body.split("\n"):
            if line.startswith("#"):
                return line.lstrip("# ")
        return str(self.id)
