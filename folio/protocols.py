"""Protocol definitions for Folio.

These protocols let the ContentStore accept alternative discovery and
construction strategies (for example an in-memory loader in tests)
without depending on the file-based implementations.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .documents import ContentDocument


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files."""

    @abstractmethod
    def iter_files(self) -> list[Path]:
        """List all content files.

        Returns:
            List of paths to content files, in a stable order.
        """
        ...


@runtime_checkable
class DocumentBuilder(Protocol):
    """Protocol for building ContentDocument objects from files."""

    @abstractmethod
    def derive_path(self, path: Path) -> str:
        """Return the document identifier a file would load under.

        Args:
            path: Path to the source file.
        """
        ...

    @abstractmethod
    def build(self, path: Path) -> ContentDocument:
        """Build a ContentDocument from a source file.

        Args:
            path: Path to the source file.

        Returns:
            Parsed, unvalidated document.
        """
        ...
