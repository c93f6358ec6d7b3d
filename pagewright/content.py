"""Content indexing for Pagewright.

This module discovers Markdown/MDX documents, reads their frontmatter and
answers the build's content query: every document sorted newest first,
capped at a limit, together with the site metadata. Like a data layer it
reports per-file problems as query errors rather than raising them, and
leaves it to the caller to decide that errors are fatal.

Key classes:
- Frontmatter: Typed view of a document's YAML frontmatter.
- ContentDocument: One indexed document.
- SiteMetadata: Site-wide settings shared by every page.
- QueryResult: Documents, site metadata and errors from one query.
- FileContentLoader: Discovers content files under a directory.
- DocumentBuilder: Builds ContentDocument objects from files.
- ContentIndex: Facade that loads documents and answers queries.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .collections import DocumentCollection
from .extractors import FrontmatterError, extract_frontmatter, parse_date
from .log import get_logger
from .utils import is_content_file, is_hidden_path, titleize

logger = get_logger(__name__)

DEFAULT_QUERY_LIMIT = 1000

_KNOWN_KEYS = ("path", "title", "date", "description", "image")


@dataclass(frozen=True)
class Frontmatter:
    """Structured metadata from the head of a document.

    Attributes:
        path: Publish path; documents without one are included sub-content.
        title: Human-readable title.
        date: Publication date, if any.
        description: Short summary.
        image: Image reference, relative to the document or absolute.
        extra: Any other frontmatter keys.
    """

    path: str | None = None
    title: str = ""
    date: datetime | None = None
    description: str = ""
    image: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], fallback_title: str = "") -> Frontmatter:
        """Build a Frontmatter from raw YAML data.

        Raises:
            FrontmatterError: If the date cannot be parsed.
        """
        path = data.get("path")
        image = data.get("image")
        return cls(
            path=str(path) if path else None,
            title=str(data.get("title") or fallback_title),
            date=parse_date(data.get("date")),
            description=str(data.get("description") or ""),
            image=str(image) if image else None,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )


@dataclass(frozen=True)
class ContentDocument:
    """A Markdown or MDX document found by the content index.

    Attributes:
        id: Stable identifier derived from the document's relative location.
        file_absolute_path: Absolute path of the source file, as a string.
        frontmatter: Parsed frontmatter.
        body: Source text following the frontmatter block.
    """

    id: str
    file_absolute_path: str
    frontmatter: Frontmatter
    body: str = ""

    @property
    def source_path(self) -> Path:
        return Path(self.file_absolute_path)


@dataclass(frozen=True)
class SiteMetadata:
    """Site-wide settings.

    Attributes:
        root_url: Public URL the site is served from.
        repo_root_url: URL of the source repository tree the content lives in.
        title: Site title.
    """

    root_url: str = ""
    repo_root_url: str = ""
    title: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> SiteMetadata:
        data = data or {}
        return cls(
            root_url=str(data.get("root_url") or ""),
            repo_root_url=str(data.get("repo_root_url") or ""),
            title=str(data.get("title") or ""),
        )


@dataclass
class QueryResult:
    """Result of a content query.

    Attributes:
        documents: Documents sorted by date, newest first.
        site: Site metadata.
        errors: Problems found while indexing; non-empty means the data is
            incomplete.
    """

    documents: list[ContentDocument]
    site: SiteMetadata
    errors: list[str] = field(default_factory=list)


class FileContentLoader:
    """Discovers content files in a directory.

    Files or directories whose name starts with ``_`` or ``.`` are skipped.

    Attributes:
        content_dir: Directory containing content.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """Return every Markdown/MDX file under the content directory, sorted."""
        files: list[Path] = []
        for path in sorted(self.content_dir.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(self.content_dir)
            if is_hidden_path(rel):
                continue
            if is_content_file(path):
                files.append(path)
        return files


class DocumentBuilder:
    """Builds ContentDocument objects from source files.

    Attributes:
        content_dir: Directory the document ids are made relative to.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def build(self, path: Path) -> ContentDocument:
        """Build a ContentDocument from a source file.

        Args:
            path: Path to the source file.

        Returns:
            ContentDocument object.

        Raises:
            FrontmatterError: If the frontmatter is malformed.
        """
        raw = path.read_text(encoding="utf-8")
        data, body = extract_frontmatter(raw)
        fallback_title = titleize(path.parent.name if path.stem == "index" else path.name)
        frontmatter = Frontmatter.from_mapping(data, fallback_title=fallback_title)
        return ContentDocument(
            id=document_id(path.relative_to(self.content_dir)),
            file_absolute_path=str(path.resolve()),
            frontmatter=frontmatter,
            body=body,
        )


def document_id(rel: Path) -> str:
    """Return a stable id for a document at a content-relative path."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, rel.as_posix()))


class ContentIndex:
    """Index of all documents under a content directory.

    The directory is scanned once, on first use. Documents that fail to
    parse are left out and recorded as errors.

    Attributes:
        content_dir: Directory containing content.
        site: Site metadata returned with every query.
    """

    def __init__(
        self,
        content_dir: Path,
        site: SiteMetadata | None = None,
        loader: FileContentLoader | None = None,
        builder: DocumentBuilder | None = None,
    ):
        self.content_dir = content_dir
        self.site = site or SiteMetadata()
        self._loader = loader or FileContentLoader(content_dir)
        self._builder = builder or DocumentBuilder(content_dir)
        self._documents: DocumentCollection | None = None
        self._errors: list[str] = []

    @property
    def documents(self) -> DocumentCollection:
        """All indexed documents, in discovery order."""
        if self._documents is None:
            self._load()
        return self._documents

    @property
    def errors(self) -> list[str]:
        """Indexing errors, as ``"<relative path>: <message>"`` strings."""
        if self._documents is None:
            self._load()
        return list(self._errors)

    def _load(self) -> None:
        if not self.content_dir.exists():
            raise FileNotFoundError(f"Expected content directory at {self.content_dir}")
        documents: list[ContentDocument] = []
        errors: list[str] = []
        for path in self._loader.iter_files():
            rel = path.relative_to(self.content_dir).as_posix()
            try:
                documents.append(self._builder.build(path))
            except (FrontmatterError, UnicodeDecodeError) as exc:
                logger.debug("Failed to index %s: %s", rel, exc)
                errors.append(f"{rel}: {exc}")
        logger.debug("Indexed %d documents from %s", len(documents), self.content_dir)
        self._documents = DocumentCollection(documents)
        self._errors = errors

    def query(self, limit: int = DEFAULT_QUERY_LIMIT) -> QueryResult:
        """Return documents sorted by date descending, capped at ``limit``.

        Args:
            limit: Maximum number of documents.

        Returns:
            QueryResult with documents, site metadata and any indexing errors.
        """
        documents = self.documents.sorted().limit(limit)
        return QueryResult(documents=list(documents), site=self.site, errors=self.errors)

    def __call__(self) -> QueryResult:
        return self.query()

    def find_by_path(self, path: str) -> ContentDocument | None:
        """Return the first document published at ``path``, if any."""
        return self.documents.find_by_path(path)
