"""Validation of content documents.

Key functions:
- validate: Check one document against the rules for its type.
- check_unique_paths: Reject a batch where two files share a path.

Checks are applied in a fixed order so a given document always reports
the same first failure: required keys, ``date``, ``draft``, taxonomy lists,
then nested blocks. Everything after ``date`` is described by a JSON schema
built from the configured block keys.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from functools import lru_cache
from typing import Any

from jsonschema import Draft202012Validator, validators

from .documents import REQUIRED_KEYS, ContentDocument
from .errors import DuplicatePathError, ValidationError
from .utils import coerce_datetime

DEFAULT_BLOCK_KEYS = (
    "banner",
    "features",
    "testimonial",
    "testimonials",
    "call_to_action",
)
TAXONOMY_KEYS = ("tags", "categories")

# YAML hands dates over as date objects, so the schema gets a "date" type
SCALAR_TYPES = ["string", "number", "boolean", "null", "date"]
TYPE_NAMES = {
    "string": "a string",
    "number": "a number",
    "boolean": "true or false",
    "null": "empty",
    "date": "a date",
    "array": "a list",
    "object": "a mapping",
}

BUTTON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "enable": {"type": "boolean"},
        "label": {"type": "string"},
        "link": {"type": "string"},
    },
    "additionalProperties": {"not": {}},
}

# Items nested inside a block item (e.g. testimonial.testimonials[0])
NESTED_ITEM_SCHEMA: dict[str, Any] = {
    "properties": {
        "enable": {"type": "boolean"},
        "button": BUTTON_SCHEMA,
    },
    "additionalProperties": {
        "type": SCALAR_TYPES + ["array"],
        "items": {"type": SCALAR_TYPES},
    },
}

ITEM_SCHEMA: dict[str, Any] = {
    "properties": {
        "enable": {"type": "boolean"},
        "button": BUTTON_SCHEMA,
    },
    "additionalProperties": {
        "type": SCALAR_TYPES + ["array"],
        "items": {"type": SCALAR_TYPES + ["object"], **NESTED_ITEM_SCHEMA},
    },
}

BLOCK_SCHEMA: dict[str, Any] = {
    "type": ["object", "array"],
    **ITEM_SCHEMA,
    "items": {"type": "object", **ITEM_SCHEMA},
}


def _is_date(checker, instance) -> bool:
    return isinstance(instance, date)


FrontMatterValidator = validators.extend(
    Draft202012Validator,
    type_checker=Draft202012Validator.TYPE_CHECKER.redefine("date", _is_date),
)


def metadata_schema(block_keys: Iterable[str] = DEFAULT_BLOCK_KEYS) -> dict[str, Any]:
    """Build the JSON schema for front matter with the given block keys."""
    properties: dict[str, Any] = {"draft": {"type": "boolean"}}
    for key in TAXONOMY_KEYS:
        properties[key] = {"type": ["array", "null"], "items": {"type": "string"}}
    for key in block_keys:
        properties[key] = BLOCK_SCHEMA
    return {"type": "object", "properties": properties}


@lru_cache(maxsize=8)
def _get_validator(block_keys: tuple[str, ...]):
    return FrontMatterValidator(metadata_schema(block_keys))


def validate(
    document: ContentDocument,
    seen_paths: dict[str, Any] | None = None,
    block_keys: Iterable[str] = DEFAULT_BLOCK_KEYS,
) -> None:
    """Validate a document against the rules for its type.

    Args:
        document: Document to check.
        seen_paths: Paths already accepted in this batch, mapped to their
            source files. When given, the document's path is checked for
            uniqueness and then recorded.
        block_keys: Front matter keys holding nested blocks.

    Raises:
        ValidationError: On the first rule the document breaks.
        DuplicatePathError: If ``seen_paths`` already holds the path.
    """
    source = document.source or document.path
    metadata = document.metadata

    for key in REQUIRED_KEYS[document.type]:
        if metadata.get(key) in (None, ""):
            raise ValidationError(
                source, key, f"missing required key '{key}' for {document.type.value}"
            )

    if "date" in metadata and metadata["date"] is not None:
        try:
            coerce_datetime(metadata["date"])
        except ValueError:
            raise ValidationError(
                source, "date", f"invalid date {metadata['date']!r}"
            ) from None

    block_keys = tuple(block_keys)
    order = {key: index for index, key in enumerate(("draft",) + TAXONOMY_KEYS + block_keys)}
    errors = sorted(
        _get_validator(block_keys).iter_errors(metadata),
        key=lambda err: (
            order.get(err.absolute_path[0], len(order)) if err.absolute_path else -1,
            [str(part) for part in err.absolute_path],
        ),
    )
    if errors:
        first = errors[0]
        key = _dotted_key(first.absolute_path)
        raise ValidationError(source, key, _describe(first, key))

    if seen_paths is not None:
        if document.path in seen_paths:
            raise DuplicatePathError(
                document.path, [seen_paths[document.path], document.source]
            )
        seen_paths[document.path] = document.source


def check_unique_paths(entries: Iterable[tuple[str, Any]]) -> None:
    """Raise DuplicatePathError if any two entries share a document path.

    Args:
        entries: (document path, source file) pairs, e.g.
            ``((d.path, d.source) for d in documents)``.

    The error lists every source file behind the first clashing path.
    """
    sources: dict[str, list[Any]] = {}
    for doc_path, source in entries:
        sources.setdefault(doc_path, []).append(source)
    for path, found in sources.items():
        if len(found) > 1:
            raise DuplicatePathError(path, found)


def _dotted_key(parts: Iterable[Any]) -> str:
    key = ""
    for part in parts:
        if isinstance(part, int):
            key += f"[{part}]"
        else:
            key += f".{part}" if key else str(part)
    return key


def _describe(error, key: str) -> str:
    if error.validator == "not":
        return f"unknown key '{key}'"
    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, str):
            expected = [expected]
        names = " or ".join(TYPE_NAMES.get(name, name) for name in expected)
        return f"'{key}' must be {names}, got {error.instance!r}"
    return f"invalid value for '{key}': {error.message}"
