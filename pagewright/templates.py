"""Template rendering engine for Pagewright.

This module uses Jinja2 to render registered pages. Templates are looked up
in the project's templates directory first and then in the built-in layouts
shipped with the package, so a project overrides a layout by dropping a file
with the same name into its own templates directory.

Key class:
- TemplateEngine: Renders post pages and the home page.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .content import ContentDocument, SiteMetadata
from .pages import GeneratedPage
from .renderers import RendererRegistry, default_renderer_registry
from .utils import join_root_url

BUILTIN_LAYOUTS_DIR = Path(__file__).parent / "layouts"
INDEX_TEMPLATE = "index.html.jinja"
DATE_FORMAT = "%B %d, %Y"

__all__ = ["BUILTIN_LAYOUTS_DIR", "TemplateEngine", "format_date"]


def format_date(value: datetime | None, fmt: str = DATE_FORMAT) -> str:
    """Format a post date for display, e.g. ``January 05, 2024``."""
    if value is None:
        return ""
    return value.strftime(fmt)


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        templates_dir: Project directory with template overrides.
        site: Site metadata available to every template.
        env: Jinja2 environment.
        renderer_registry: Renders document bodies to HTML.
    """

    def __init__(
        self,
        templates_dir: Path | None,
        site: SiteMetadata,
        renderer_registry: RendererRegistry | None = None,
    ):
        """Initialize the template engine.

        Args:
            templates_dir: Directory with project templates, may be None.
            site: Site metadata.
            renderer_registry: Optional custom renderer registry.
        """
        self.templates_dir = templates_dir
        self.site = site
        self.renderer_registry = renderer_registry or default_renderer_registry
        search_path = [BUILTIN_LAYOUTS_DIR]
        if templates_dir is not None and templates_dir.exists():
            search_path.insert(0, templates_dir)
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
        )
        self.env.filters["date_format"] = format_date
        self.env.globals["site"] = self.site
        self.env.globals["url_for"] = self._url_for

    def _url_for(self, path: str) -> str:
        """Return an absolute URL for a site path when a root URL is set."""
        if path.startswith(("http://", "https://", "//")):
            return path
        if self.site.root_url:
            return join_root_url(self.site.root_url, path)
        return path if path.startswith("/") else f"/{path}"

    def render_body(self, document: ContentDocument, base_url: str = "") -> Markup:
        """Render a document's body to HTML.

        Args:
            document: Document to render.
            base_url: Publish path relative images are resolved against.

        Returns:
            Markup-safe HTML.
        """
        html = self.renderer_registry.render(document.body, document.source_path, base_url)
        return Markup(html)

    def render_page(
        self, page: GeneratedPage, document: ContentDocument, site: SiteMetadata | None = None
    ) -> str:
        """Render a registered page for the document published at its path.

        Args:
            page: Page registration; its component names the template.
            document: Document published at the page's path.
            site: Optional site metadata overriding the engine's.

        Returns:
            Rendered HTML string.
        """
        template = self.env.get_template(page.component)
        return template.render(
            page=page,
            page_context=page.context,
            document=document,
            frontmatter=document.frontmatter,
            content=self.render_body(document, base_url=page.path),
            site=site or self.site,
        )

    def render_index(self, posts: Iterable[ContentDocument]) -> str:
        """Render the home page listing posts.

        Args:
            posts: Published documents, in display order.

        Returns:
            Rendered HTML string.
        """
        template = self.env.get_template(INDEX_TEMPLATE)
        return template.render(posts=list(posts))
