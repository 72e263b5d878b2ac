"""Error types for Folio.

Every error raised while loading content derives from ContentError and
carries the file it relates to, so the CLI can point authors at the
offending document.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path


class ContentError(Exception):
    """Error while loading content, with file context.

    Attributes:
        source_path: Path to the file that caused the error (may be None).
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path | str | None, message: str):
        self.source_path = Path(source_path) if source_path is not None else None
        self.message = message
        prefix = f"{self.source_path}: " if self.source_path is not None else ""
        super().__init__(f"{prefix}{message}")


class ParseError(ContentError):
    """Malformed front matter block."""


class ValidationError(ContentError):
    """Missing required key or invalid value for the document type.

    Attributes:
        key: Dotted key path that failed (e.g. ``date`` or
            ``features[0].button.enable``).
    """

    def __init__(self, source_path: Path | str | None, key: str, message: str):
        self.key = key
        super().__init__(source_path, message)


class DuplicatePathError(ContentError):
    """Two files resolve to the same document path."""

    def __init__(self, path: str, sources: Iterable[Path | str | None]):
        self.path = path
        self.sources = [Path(s) for s in sources if s is not None]
        listed = ", ".join(str(s) for s in self.sources) or "<unknown>"
        super().__init__(None, f"duplicate document path '{path}' from {listed}")


class ConfigError(ContentError):
    """Invalid folio.yaml configuration."""


class ContentLoadError(ContentError):
    """Aggregate of per-document errors collected during a load pass.

    Attributes:
        errors: Every ParseError/ValidationError found, in scan order.
    """

    def __init__(self, errors: Sequence[ContentError]):
        self.errors = list(errors)
        lines = [str(err) for err in self.errors]
        noun = "document" if len(self.errors) == 1 else "documents"
        super().__init__(
            None, f"{len(self.errors)} {noun} failed to load:\n  " + "\n  ".join(lines)
        )
