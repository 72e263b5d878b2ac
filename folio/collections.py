from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from .documents import ContentDocument, DocumentType
from .utils import slugify


def filter_published(documents: Iterable[ContentDocument]) -> DocumentCollection:
    """Drop documents flagged as drafts."""
    return DocumentCollection(d for d in documents if not d.draft)


def sort_by_date(documents: Iterable[ContentDocument]) -> DocumentCollection:
    """Order documents newest first, breaking date ties by path ascending.

    Undated documents follow all dated ones, in path order.
    """
    by_path = sorted(documents, key=lambda d: d.path)
    dated = [d for d in by_path if d.date is not None]
    undated = [d for d in by_path if d.date is None]
    # sorted() is stable, so equal dates keep their path order
    dated.sort(key=lambda d: d.date, reverse=True)
    return DocumentCollection(dated + undated)


def resolve_author(
    document: ContentDocument, documents: Iterable[ContentDocument]
) -> ContentDocument | None:
    """Find the author profile a document refers to.

    Matches on the profile title or on slugs; a miss is not an error.
    """
    name = document.author
    if not name:
        return None
    wanted = slugify(name)
    for candidate in documents:
        if candidate.type is not DocumentType.AUTHOR:
            continue
        if candidate.title == name or candidate.slug == wanted or slugify(candidate.title) == wanted:
            return candidate
    return None


class DocumentCollection(Sequence[ContentDocument]):
    """Lightweight helper for working with lists of ContentDocuments."""

    def __init__(self, documents: Iterable[ContentDocument]):
        self._documents = list(documents)

    def __iter__(self) -> Iterator[ContentDocument]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return DocumentCollection(self._documents[item])
        return self._documents[item]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DocumentCollection):
            return self._documents == other._documents
        if isinstance(other, list):
            return self._documents == other
        return NotImplemented

    def get(self, path: str) -> ContentDocument | None:
        for document in self._documents:
            if document.path == path:
                return document
        return None

    def of_type(self, doc_type: DocumentType | str) -> DocumentCollection:
        doc_type = DocumentType.parse(doc_type)
        return DocumentCollection(d for d in self._documents if d.type is doc_type)

    def posts(self) -> DocumentCollection:
        return self.of_type(DocumentType.POST)

    def settings(self, path: str) -> ContentDocument | None:
        """Return the settings document at ``path``, if loaded."""
        document = self.get(path)
        if document is not None and document.type is DocumentType.SETTINGS:
            return document
        return None

    def with_tag(self, tag: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if tag in d.tags)

    def in_category(self, category: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if category in d.categories)

    def by_author(self, author: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.author == author)

    def drafts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.draft)

    def published(self) -> DocumentCollection:
        return filter_published(self._documents)

    def sorted_by_date(self) -> DocumentCollection:
        return sort_by_date(self._documents)

    def latest(self, count: int = 5) -> DocumentCollection:
        return DocumentCollection(self.sorted_by_date()[:count])

    def taxonomy(self, key: str = "tags") -> TermCollection:
        """Index documents by the terms listed under ``key`` (tags or categories)."""
        mapping: dict[str, list[ContentDocument]] = {}
        for document in self._documents:
            terms = document.tags if key == "tags" else document.categories
            for term in terms:
                mapping.setdefault(term, []).append(document)
        return TermCollection(mapping)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._documents)} documents)"


class TermCollection(Mapping[str, DocumentCollection]):
    """Mapping of taxonomy term to DocumentCollection."""

    def __init__(self, mapping: dict[str, Iterable[ContentDocument]]):
        self._mapping = {k: DocumentCollection(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> DocumentCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TermCollection({len(self._mapping)} terms)"
