"""Protocol definitions for Pagewright.

These protocols describe the seams of the build: where content comes from,
where page registrations go, and what renders a registered page. Tests and
alternative front ends plug in at these points.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import ContentDocument, QueryResult, SiteMetadata
    from .pages import GeneratedPage


@runtime_checkable
class ContentQuery(Protocol):
    """Callable that fetches the build's document set in one go."""

    @abstractmethod
    def __call__(self) -> QueryResult:
        """Run the query.

        Returns:
            QueryResult with documents sorted newest first, site metadata and
            any errors the content source reported.
        """
        ...


@runtime_checkable
class PageCreator(Protocol):
    """Callable sink for page registrations, e.g. ``PageRegistry.create_page``."""

    @abstractmethod
    def __call__(
        self, path: str, component: str, context: Mapping[str, Any]
    ) -> None:
        """Register one output page.

        Args:
            path: Output URL path.
            component: Template used to render the page.
            context: Values handed to the template.
        """
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Renders a registered page to HTML."""

    @abstractmethod
    def render_page(
        self, page: GeneratedPage, document: ContentDocument, site: SiteMetadata
    ) -> str:
        """Render a page for a document.

        Args:
            page: The page registration.
            document: The document published at the page's path.
            site: Site metadata.

        Returns:
            Rendered HTML string.
        """
        ...
