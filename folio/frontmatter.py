"""Front matter parsing and serialization for Folio.

A content file is a YAML mapping between ``---`` fences followed by a
markdown body. Unlike a renderer, which can afford to fall back to an
empty mapping, the loader treats a malformed block as a ParseError so
content authors see the problem.

Key functions:
- split_frontmatter: Split raw text into (metadata, body).
- parse_document: Build a ContentDocument from raw text.
- dump_document: Serialize a ContentDocument back to text.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from .documents import ContentDocument, DocumentType
from .errors import ParseError

OPEN_FENCE_RE = re.compile(r"\A---[ \t]*\r?\n")
CLOSE_FENCE_RE = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)
BOM = "\ufeff"


class FrontMatterLoader(yaml.SafeLoader):
    """Safe loader that keeps impossible timestamps as strings.

    PyYAML raises a bare ValueError for values like ``2024-02-30``; keeping
    the raw text lets validation report it as an invalid date instead.
    """


def _construct_timestamp(loader: FrontMatterLoader, node: yaml.Node) -> Any:
    try:
        return yaml.SafeLoader.construct_yaml_timestamp(loader, node)
    except ValueError:
        return loader.construct_scalar(node)


FrontMatterLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


def split_frontmatter(
    text: str, source: Path | str | None = None
) -> tuple[dict[str, Any], str]:
    """Split raw file content into front matter and body.

    Text that does not open with a ``---`` fence has no front matter: the
    metadata is empty and the whole text is the body.

    Args:
        text: Raw file content.
        source: File path used in error messages.

    Returns:
        Tuple of (metadata dict, body).

    Raises:
        ParseError: If the block is unterminated, is not valid YAML, or
            does not hold a mapping.
    """
    if text.startswith(BOM):
        text = text[len(BOM) :]
    opening = OPEN_FENCE_RE.match(text)
    if not opening:
        return {}, text
    closing = CLOSE_FENCE_RE.search(text, opening.end())
    if not closing:
        raise ParseError(source, "front matter block is not closed with '---'")
    raw = text[opening.end() : closing.start()]
    try:
        data = yaml.load(raw, Loader=FrontMatterLoader)
    except yaml.YAMLError as exc:
        raise ParseError(source, f"invalid YAML in front matter: {_describe(exc)}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(
            source, f"front matter must be a mapping, got {type(data).__name__}"
        )
    bad_keys = [k for k in data if not isinstance(k, str)]
    if bad_keys:
        raise ParseError(source, f"front matter keys must be strings: {bad_keys!r}")
    return data, text[closing.end() :]


def parse_document(
    text: str,
    path: str,
    doc_type: DocumentType,
    source: Path | None = None,
) -> ContentDocument:
    """Parse raw text into a ContentDocument.

    Args:
        text: Raw file content.
        path: Document identifier.
        doc_type: Type for the document.
        source: File the text was read from.

    Returns:
        The parsed document (not yet validated).
    """
    metadata, body = split_frontmatter(text, source if source is not None else path)
    return ContentDocument(
        path=path, type=doc_type, metadata=metadata, body=body, source=source
    )


def dump_document(document: ContentDocument) -> str:
    """Serialize a document to front matter plus body.

    A front matter block is always written, even when empty, so the body
    never gets mistaken for metadata on the way back in.
    """
    if document.metadata:
        header = yaml.safe_dump(
            document.metadata,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    else:
        header = ""
    return f"---\n{header}---\n{document.body}"


def _describe(exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None) or str(exc)
    if mark is not None:
        # problem_mark is relative to the block; +2 accounts for the opening fence
        return f"{problem} (line {mark.line + 2}, column {mark.column + 1})"
    return problem
