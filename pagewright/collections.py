from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .content import ContentDocument


class DocumentCollection(Sequence["ContentDocument"]):
    """Lightweight helper for working with lists of ContentDocuments."""

    def __init__(self, documents: Iterable[ContentDocument]):
        self._documents = list(documents)

    def __iter__(self) -> Iterator[ContentDocument]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, item):
        return self._documents[item]

    def published(self) -> DocumentCollection:
        """Documents that declare a publish path."""
        return DocumentCollection(d for d in self._documents if d.frontmatter.path)

    def sorted(self, reverse: bool = True) -> DocumentCollection:
        """Sort documents by date.

        Undated documents always come last. Documents with equal dates keep
        their current relative order.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new DocumentCollection with sorted documents.
        """
        dated = [d for d in self._documents if d.frontmatter.date is not None]
        undated = [d for d in self._documents if d.frontmatter.date is None]
        dated.sort(key=lambda d: d.frontmatter.date, reverse=reverse)
        return DocumentCollection(dated + undated)

    def limit(self, count: int) -> DocumentCollection:
        return DocumentCollection(self._documents[: max(count, 0)])

    def find_by_path(self, path: str) -> ContentDocument | None:
        for document in self._documents:
            if document.frontmatter.path == path:
                return document
        return None

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._documents)} documents)"
