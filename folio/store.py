"""Content store for Folio.

This module ties discovery, parsing and validation together into a single
load pass. It also loads the optional ``folio.yaml`` project configuration.

Key functions:
- load_config: Loads configuration from folio.yaml.
- load_all: Loads and validates every document under a content directory.

Key classes:
- ContentStore: Facade over the loader, builder and validator.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from .collections import DocumentCollection
from .documents import ContentDocument, DocumentType
from .errors import ConfigError, ContentError, ContentLoadError
from .loader import (
    DEFAULT_EXTENSIONS,
    DEFAULT_TYPE_RULES,
    DefaultDocumentBuilder,
    FileContentLoader,
    TypeResolver,
)
from .protocols import ContentLoader, DocumentBuilder
from .validation import DEFAULT_BLOCK_KEYS, check_unique_paths, validate

CONFIG_FILENAME = "folio.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "content_dir": "content",
    "posts_dir": "blog",
    "extensions": DEFAULT_EXTENSIONS,
    "type_rules": DEFAULT_TYPE_RULES,
    "block_keys": DEFAULT_BLOCK_KEYS,
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from folio.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not a mapping or holds values of the
            wrong shape.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(config_path, f"invalid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(config_path, "configuration must be a mapping")
        for key in ("content_dir", "posts_dir"):
            if key in loaded and not isinstance(loaded[key], str):
                raise ConfigError(config_path, f"'{key}' must be a string")
        for key in ("extensions", "block_keys"):
            if key in loaded and not _is_string_list(loaded[key]):
                raise ConfigError(config_path, f"'{key}' must be a list of strings")
        if "type_rules" in loaded:
            loaded["type_rules"] = _parse_type_rules(loaded["type_rules"], config_path)
        config.update(loaded)
    return config


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _parse_type_rules(rules: Any, config_path: Path) -> list[tuple[str, DocumentType]]:
    if not isinstance(rules, list):
        raise ConfigError(config_path, "'type_rules' must be a list")
    parsed: list[tuple[str, DocumentType]] = []
    for index, rule in enumerate(rules):
        if not isinstance(rule, dict) or "pattern" not in rule or "type" not in rule:
            raise ConfigError(
                config_path, f"type_rules[{index}] needs 'pattern' and 'type' keys"
            )
        try:
            doc_type = DocumentType.parse(rule["type"])
        except ValueError as exc:
            raise ConfigError(config_path, f"type_rules[{index}]: {exc}") from None
        parsed.append((str(rule["pattern"]), doc_type))
    return parsed


class ContentStore:
    """Loads, validates and exposes content documents.

    Every call to ``load_all`` or ``iter_documents`` re-reads storage; the
    store keeps no state between passes.

    Attributes:
        content_dir: Directory containing content.
        config: Configuration dictionary (see ``load_config``).
    """

    def __init__(
        self,
        content_dir: Path,
        config: dict[str, Any] | None = None,
        content_loader: ContentLoader | None = None,
        document_builder: DocumentBuilder | None = None,
    ):
        self.content_dir = content_dir
        self.config = config or DEFAULT_CONFIG.copy()
        self._content_loader = content_loader or FileContentLoader(
            content_dir, self.config.get("extensions", DEFAULT_EXTENSIONS)
        )
        self._document_builder = document_builder or DefaultDocumentBuilder(
            content_dir,
            type_resolver=TypeResolver(self.config.get("type_rules", DEFAULT_TYPE_RULES)),
        )

    @classmethod
    def from_project(cls, project_root: Path) -> ContentStore:
        """Create a store for a project using its folio.yaml."""
        config = load_config(project_root)
        return cls(project_root / config["content_dir"], config)

    def iter_documents(self) -> Iterator[ContentDocument]:
        """Lazily parse and validate documents one file at a time.

        Raises the first error encountered; path uniqueness is checked as
        documents stream past.

        Raises:
            ParseError, ValidationError, DuplicatePathError
        """
        seen: dict[str, Path] = {}
        block_keys = self.config.get("block_keys", DEFAULT_BLOCK_KEYS)
        for path in self._content_loader.iter_files():
            document = self._document_builder.build(path)
            validate(document, seen_paths=seen, block_keys=block_keys)
            yield document

    def load_all(self) -> DocumentCollection:
        """Load every document, collecting per-document errors.

        Returns:
            All documents in path order.

        Raises:
            FileNotFoundError: If the content directory does not exist.
            DuplicatePathError: If two files resolve to the same path.
            ContentLoadError: If any document failed to parse or validate.
        """
        if not self.content_dir.is_dir():
            raise FileNotFoundError(f"Expected content directory at {self.content_dir}")
        block_keys = self.config.get("block_keys", DEFAULT_BLOCK_KEYS)
        files = self._content_loader.iter_files()
        check_unique_paths((self._document_builder.derive_path(path), path) for path in files)
        documents: list[ContentDocument] = []
        errors: list[ContentError] = []
        for path in files:
            try:
                document = self._document_builder.build(path)
                validate(document, block_keys=block_keys)
            except ContentError as exc:
                errors.append(exc)
                continue
            documents.append(document)
        if errors:
            raise ContentLoadError(errors)
        return DocumentCollection(documents)


def load_all(root_directory: Path, config: dict[str, Any] | None = None) -> DocumentCollection:
    """Load and validate every document under ``root_directory``.

    Args:
        root_directory: Content directory to scan.
        config: Optional configuration (defaults apply when omitted).

    Returns:
        All documents in path order.
    """
    return ContentStore(root_directory, config).load_all()
