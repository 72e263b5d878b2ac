"""Content file discovery and document construction for Folio.

Key classes:
- FileContentLoader: Implementation of ContentLoader protocol for file-based content.
- TypeResolver: Infers a DocumentType from the directory convention.
- PathDeriver: Derives the document identifier from a file path.
- DefaultDocumentBuilder: Implementation of DocumentBuilder protocol.
"""

from __future__ import annotations

from collections.abc import Sequence
from fnmatch import fnmatchcase
from pathlib import Path

from .documents import ContentDocument, DocumentType
from .errors import ParseError, ValidationError
from .frontmatter import parse_document
from .utils import is_content_file, is_hidden_path

DEFAULT_EXTENSIONS = (".md", ".markdown")
TYPE_KEY = "document_type"

DEFAULT_TYPE_RULES: tuple[tuple[str, DocumentType], ...] = (
    ("_index.md", DocumentType.SETTINGS),
    ("homepage.md", DocumentType.SETTINGS),
    ("settings/*", DocumentType.SETTINGS),
    ("author.md", DocumentType.AUTHOR),
    ("authors/*", DocumentType.AUTHOR),
    ("*/_index.md", DocumentType.PAGE),
    ("blog/*", DocumentType.POST),
    ("posts/*", DocumentType.POST),
)


class FileContentLoader:
    """Discovers content files under a directory.

    Attributes:
        content_dir: Directory containing content.
        extensions: Accepted file suffixes.
    """

    def __init__(self, content_dir: Path, extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self.content_dir = content_dir
        self.extensions = tuple(ext.lower() for ext in extensions)

    def iter_files(self) -> list[Path]:
        """List all content files, sorted by relative path.

        Returns:
            List of paths to content files.
        """
        files: list[Path] = []
        for path in self.content_dir.rglob("*"):
            if path.is_dir():
                continue
            rel = path.relative_to(self.content_dir)
            if is_hidden_path(rel):
                continue
            if is_content_file(path, self.extensions):
                files.append(path)
        return sorted(files, key=lambda p: p.relative_to(self.content_dir).as_posix())


class TypeResolver:
    """Infers document types from ordered glob rules.

    Patterns are matched case-sensitively against the POSIX path relative to
    the content root; the first match wins and ``page`` is the fallback.
    ``*`` crosses directory separators, so ``blog/*`` covers nested folders.
    """

    def __init__(self, rules: Sequence[tuple[str, DocumentType]] = DEFAULT_TYPE_RULES):
        self.rules = list(rules)

    def resolve(self, rel: Path) -> DocumentType:
        posix = rel.as_posix()
        for pattern, doc_type in self.rules:
            if fnmatchcase(posix, pattern):
                return doc_type
        return DocumentType.PAGE


class PathDeriver:
    """Derives document identifiers from file paths."""

    def derive(self, rel: Path) -> str:
        """Return the relative POSIX path with its extension dropped.

        Args:
            rel: Path relative to the content root.

        Returns:
            Document identifier, e.g. ``blog/my-post``.
        """
        return rel.with_suffix("").as_posix()


class DefaultDocumentBuilder:
    """Builds ContentDocument objects from source files.

    Attributes:
        content_dir: Directory containing content.
        type_resolver: Type resolver instance.
        path_deriver: Path deriver instance.
    """

    def __init__(
        self,
        content_dir: Path,
        type_resolver: TypeResolver | None = None,
        path_deriver: PathDeriver | None = None,
    ):
        self.content_dir = content_dir
        self.type_resolver = type_resolver or TypeResolver()
        self.path_deriver = path_deriver or PathDeriver()

    def derive_path(self, path: Path) -> str:
        """Return the document identifier for a file under the content root."""
        return self.path_deriver.derive(path.relative_to(self.content_dir))

    def build(self, path: Path) -> ContentDocument:
        """Read and parse one content file.

        An explicit ``document_type`` key in the front matter overrides the type
        inferred from the file's location.

        Args:
            path: Path to the source file.

        Returns:
            Parsed, unvalidated document.

        Raises:
            ParseError: If the file cannot be read as UTF-8 or the front
                matter is malformed.
            ValidationError: If ``document_type`` names an unknown type.
        """
        rel = path.relative_to(self.content_dir)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(path, f"file is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise ParseError(path, f"cannot read file: {exc}") from exc
        doc_path = self.path_deriver.derive(rel)
        document = parse_document(text, doc_path, self.type_resolver.resolve(rel), source=path)

        declared = document.metadata.get(TYPE_KEY)
        if declared is not None:
            try:
                doc_type = DocumentType.parse(declared)
            except ValueError as exc:
                raise ValidationError(path, TYPE_KEY, str(exc)) from None
            if doc_type is not document.type:
                document = ContentDocument(
                    path=document.path,
                    type=doc_type,
                    metadata=document.metadata,
                    body=document.body,
                    source=path,
                )
        return document
