"""Utility functions for Folio.

This module contains small helpers used throughout the Folio codebase.
These include string processing, path handling and date coercion.

Key functions:
    slugify: Convert filenames to URL slugs.
    titleize: Convert filenames to human-readable titles.
    coerce_datetime: Turn a front matter date value into an aware datetime.
    first_paragraph: Extract a plain-text summary from a markdown body.
    is_content_file: Check if a path has one of the content extensions.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from pathlib import Path

DATE_PREFIX_PARTS = 3


def _strip_date_prefix(base: str) -> str:
    if "-" in base:
        parts = base.split("-")
        if len(parts) > DATE_PREFIX_PARTS and all(
            p.isdigit() for p in parts[:DATE_PREFIX_PARTS]
        ):
            return "-".join(parts[DATE_PREFIX_PARTS:])
    return base


def slugify(name: str) -> str:
    """Convert a name (filename stem or free text) to a slug, dropping date prefix.

    Args:
        name: Filename stem or arbitrary text.

    Returns:
        URL-friendly slug.
    """
    cleaned = _strip_date_prefix(name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'

        >>> titleize("getting-started")
        'Getting Started'
    """
    base = _strip_date_prefix(Path(filename).stem)
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def coerce_datetime(value: object) -> datetime:
    """Coerce a front matter date value into a timezone-aware datetime.

    PyYAML already turns unquoted timestamps into ``date``/``datetime``
    objects; quoted values arrive as strings and are parsed as ISO 8601.
    Naive values are treated as UTC so that mixed inputs stay comparable.

    Args:
        value: Raw value from front matter.

    Returns:
        Aware datetime.

    Raises:
        ValueError: If the value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        result = datetime.fromisoformat(text)
    else:
        raise ValueError(f"not a date: {value!r}")
    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result


def first_paragraph(text: str, limit: int = 160) -> str:
    """Extract and clean the first paragraph from markdown text.

    Skips headings, images, fences and HTML-only paragraphs, strips
    inline HTML tags, collapses whitespace and truncates to ``limit``.

    Args:
        text: Markdown body.
        limit: Maximum character length of result.

    Returns:
        Cleaned first paragraph, or empty string.
    """
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    for para in paragraphs:
        if para.startswith(("#", "![", "```", "{{")):
            continue
        para = re.sub(r"<[^>]+>", "", para)
        collapsed = " ".join(para.split())
        if collapsed:
            return collapsed[:limit]
    return ""


def is_hidden_path(path: Path) -> bool:
    """Check if any directory component is hidden or internal.

    Directories starting with ``.`` or ``_`` are skipped by the loader; only
    the file name itself may carry a leading underscore (``_index.md``).

    Args:
        path: Path relative to the content root.

    Returns:
        True if the path should be skipped.
    """
    if path.name.startswith("."):
        return True
    return any(part.startswith((".", "_")) for part in path.parts[:-1])


def is_content_file(path: Path, extensions: tuple[str, ...] = (".md", ".markdown")) -> bool:
    """Check if a path is a content file.

    Args:
        path: Path to check.
        extensions: Accepted suffixes (case-insensitive).

    Returns:
        True if the file has one of the content extensions.
    """
    return path.suffix.lower() in extensions
