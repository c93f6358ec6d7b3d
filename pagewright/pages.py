"""Page generation for Pagewright.

This module turns the result of the content query into page registrations:
one page per document that declares a publish path, each bound to the blog
post template and a small context of derived links.

Key classes and functions:
- GeneratedPage: One page registration.
- PageRegistry: Collects registrations; a later registration for the same
  path replaces the earlier one.
- PostLinks: Derives the social-search and source-repository URLs of a post.
- create_pages: Runs the query and registers pages.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .content import SiteMetadata
from .log import get_logger
from .protocols import ContentQuery, PageCreator
from .utils import encode_uri_component, strip_first

logger = get_logger(__name__)

BLOG_POST_TEMPLATE = "blog-post.html.jinja"
DEFAULT_SOCIAL_SEARCH_URL = "https://twitter.com/search?q={query}"
DEFAULT_SOURCE_SUFFIX = "/index.mdx"


class PageGenerationError(Exception):
    """The content query reported errors, so no pages were generated.

    Attributes:
        errors: Error messages reported by the query.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        details = "\n".join(f"  {error}" for error in self.errors)
        super().__init__(f"Content query failed with {len(self.errors)} error(s):\n{details}")


@dataclass(frozen=True)
class GeneratedPage:
    """A page registration.

    Attributes:
        path: Output URL path.
        component: Template used to render the page.
        context: Values handed to the template.
    """

    path: str
    component: str
    context: Mapping[str, Any] = field(default_factory=dict)


class PageRegistry:
    """Ordered collection of page registrations keyed by path.

    Registering an already-registered path replaces the earlier page in
    place and logs a warning.
    """

    def __init__(self):
        self._pages: dict[str, GeneratedPage] = {}

    def create_page(
        self, path: str, component: str, context: Mapping[str, Any] | None = None
    ) -> None:
        page = GeneratedPage(path=path, component=component, context=dict(context or {}))
        if path in self._pages:
            logger.warning("Page %s registered more than once; keeping the last", path)
        self._pages[path] = page

    def get(self, path: str) -> GeneratedPage | None:
        return self._pages.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._pages

    def __iter__(self) -> Iterator[GeneratedPage]:
        return iter(self._pages.values())

    def __len__(self) -> int:
        return len(self._pages)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PageRegistry({len(self._pages)} pages)"


@dataclass(frozen=True)
class PostLinks:
    """Derives the auxiliary URLs shown under a post.

    Attributes:
        site: Site metadata providing the root and repository URLs.
        project_root: Prefix removed from file locations, as a string.
        social_search_template: Search URL with a ``{query}`` placeholder.
        source_suffix: Trailing file name removed from source locations.
    """

    site: SiteMetadata
    project_root: str
    social_search_template: str = DEFAULT_SOCIAL_SEARCH_URL
    source_suffix: str = DEFAULT_SOURCE_SUFFIX

    def social_search_url(self, path: str) -> str:
        """Return a search link for mentions of the post's public URL.

        Args:
            path: Publish path of the post.

        Returns:
            The search template with ``root_url + path`` percent-encoded into it.
        """
        query = encode_uri_component(f"{self.site.root_url}{path}")
        return self.social_search_template.replace("{query}", query)

    def source_url(self, file_location: str) -> str:
        """Return the repository URL of the post's source.

        The first occurrence of the project root and then of the source
        suffix are removed from the file location. Either substitution is a
        no-op when its pattern is absent.

        Args:
            file_location: Absolute path of the post's source file.

        Returns:
            ``repo_root_url`` followed by the trimmed location.
        """
        location = strip_first(file_location, self.project_root)
        location = strip_first(location, self.source_suffix)
        return f"{self.site.repo_root_url}{location}"


def create_pages(
    query: ContentQuery,
    create_page: PageCreator,
    project_root: Path | str,
    component: str = BLOG_POST_TEMPLATE,
    social_search_template: str = DEFAULT_SOCIAL_SEARCH_URL,
    source_suffix: str = DEFAULT_SOURCE_SUFFIX,
) -> None:
    """Register one page for each document that has a publish path.

    Args:
        query: Content query, run exactly once.
        create_page: Registration callable receiving path, component and context.
        project_root: Directory prefix stripped from source file locations.
        component: Template every post page is rendered with.
        social_search_template: Search URL with a ``{query}`` placeholder.
        source_suffix: Trailing file name stripped from source locations.

    Raises:
        PageGenerationError: If the query reports any errors. Nothing is
            registered in that case.
    """
    result = query()
    if result.errors:
        raise PageGenerationError(result.errors)

    links = PostLinks(
        site=result.site,
        project_root=str(project_root),
        social_search_template=social_search_template,
        source_suffix=source_suffix,
    )
    for document in result.documents:
        path = document.frontmatter.path
        if not path:
            # Included sub-content of another post
            logger.debug("Skipping %s: no publish path", document.file_absolute_path)
            continue
        create_page(
            path=path,
            component=component,
            context={
                "social_search_url": links.social_search_url(path),
                "source_url": links.source_url(document.file_absolute_path),
            },
        )
