"""Content document model for Folio.

Key classes:
- DocumentType: Discriminant for the four kinds of content document.
- ContentDocument: Frozen dataclass pairing front matter with a body.

REQUIRED_KEYS maps each DocumentType to the front matter keys it must carry;
validation lives in ``folio.validation``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

from .utils import coerce_datetime, first_paragraph, slugify, titleize


class DocumentType(str, Enum):
    """Kind of content document."""

    POST = "post"
    PAGE = "page"
    AUTHOR = "author"
    SETTINGS = "settings"

    @classmethod
    def parse(cls, value: str) -> DocumentType:
        """Look up a type by its name, case-insensitively.

        Raises:
            ValueError: If the name is not a known type.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            known = ", ".join(t.value for t in cls)
            raise ValueError(f"unknown document type '{value}' (expected one of {known})") from None


REQUIRED_KEYS: dict[DocumentType, tuple[str, ...]] = {
    DocumentType.POST: ("title", "date", "author"),
    DocumentType.PAGE: ("title",),
    DocumentType.AUTHOR: ("title",),
    DocumentType.SETTINGS: (),
}


@dataclass(frozen=True)
class ContentDocument:
    """A content file: typed front matter plus a markdown body.

    Attributes:
        path: Identifier relative to the content root, POSIX separators and
            no extension (``blog/my-post``). Unique within a store.
        type: Document type, fixed at creation.
        metadata: Parsed front matter.
        body: Markdown text following the front matter; may be empty.
        source: File the document was read from, if any. Not part of equality.
    """

    path: str
    type: DocumentType
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    source: Path | None = field(default=None, compare=False, repr=False)

    @property
    def title(self) -> str:
        value = self.metadata.get("title")
        if value is None or value == "":
            return titleize(PurePosixPath(self.path).name)
        return str(value)

    @property
    def date(self) -> datetime | None:
        """Parsed ``date`` as an aware datetime, or None when absent or invalid."""
        value = self.metadata.get("date")
        if value is None:
            return None
        try:
            return coerce_datetime(value)
        except ValueError:
            return None

    @property
    def draft(self) -> bool:
        return self.metadata.get("draft") is True

    @property
    def author(self) -> str | None:
        value = self.metadata.get("author")
        return str(value) if value is not None else None

    @property
    def tags(self) -> list[str]:
        return _as_list(self.metadata.get("tags"))

    @property
    def categories(self) -> list[str]:
        return _as_list(self.metadata.get("categories"))

    @property
    def summary(self) -> str:
        description = self.metadata.get("description")
        if description:
            return str(description)
        return first_paragraph(self.body)

    @property
    def slug(self) -> str:
        return slugify(PurePosixPath(self.path).name)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly listing entry."""
        date = self.date
        return {
            "path": self.path,
            "type": self.type.value,
            "title": self.title,
            "date": date.isoformat() if date else None,
            "author": self.author,
            "tags": self.tags,
            "categories": self.categories,
            "draft": self.draft,
            "summary": self.summary,
        }


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]
