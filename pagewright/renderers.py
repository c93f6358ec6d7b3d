"""Content renderers for Pagewright.

This module turns document bodies into HTML. Markdown goes through mistune
with Pygments highlighting. MDX is treated as Markdown once its top-level
import/export statements are removed; an import of a sibling ``.md``/``.mdx``
file turns the matching ``<Component />`` tag into that file's rendered body.

Key classes:
- MarkdownRenderer: Renders Markdown to HTML.
- MdxRenderer: Renders MDX, expanding sibling-document includes.
- RendererRegistry: Picks the renderer for a file.
"""

from __future__ import annotations

import re
from pathlib import Path

import mistune

from .extractors import (
    extract_frontmatter,
    extract_mdx_imports,
    iter_fenced_lines,
    strip_mdx_esm,
)
from .log import get_logger

logger = get_logger(__name__)

# Terminated so that token 1 is never a prefix of token 10.
_INCLUDE_TOKEN = "PAGEWRIGHTINCLUDE{index}X"


class RenderError(Exception):
    """Raised when a document body cannot be rendered."""


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


def _rewrite_image_path(src: str, base_url: str) -> str:
    """Point a relative image source at the page the post is published under.

    Args:
        src: Original image source.
        base_url: Publish path of the page, e.g. ``/my-post``.

    Returns:
        Rewritten image source path.
    """
    if not base_url or src.startswith(("http://", "https://", "//", "/", "data:", "#")):
        return src
    return f"{base_url.rstrip('/')}/{src.removeprefix('./')}"


class _HighlightRenderer(mistune.HTMLRenderer):
    """Markdown renderer with heading anchors, image rewriting and highlighting.

    Attributes:
        base_url: Publish path relative images are resolved against.
    """

    def __init__(self, base_url: str = ""):
        super().__init__(escape=False)
        self.base_url = base_url
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        base_id = _generate_heading_id(text)

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def image(self, text: str, url: str | None = None, title: str | None = None):
        src = _rewrite_image_path(url or "", self.base_url)
        return super().image(text, src, title)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Unknown languages fall back to an escaped ``<pre><code>`` block.
        """
        lang = info.split()[0] if info else None
        if lang:
            from pygments import highlight
            from pygments.formatters import HtmlFormatter
            from pygments.lexers import get_lexer_by_name
            from pygments.util import ClassNotFound

            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                logger.debug("No lexer for %r; rendering plain code block", lang)
            else:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown content to HTML."""

    def can_render(self, path: Path) -> bool:
        return path.suffix.lower() == ".md"

    def render(self, content: str, path: Path, base_url: str = "") -> str:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source without frontmatter.
            path: Path of the source file.
            base_url: Publish path relative images are resolved against.

        Returns:
            Rendered HTML.
        """
        markdown = mistune.create_markdown(
            renderer=_HighlightRenderer(base_url),
            plugins=["strikethrough", "footnotes", "table", "url"],
        )
        return markdown(content)


class MdxRenderer(MarkdownRenderer):
    """Renders MDX content, expanding imports of sibling documents.

    Only self-closing tags (``<Part2 />``) of imported ``.md``/``.mdx`` files
    are expanded; other components are passed through as raw HTML.

    Attributes:
        registry: Registry used to render included files.
    """

    def __init__(self, registry: RendererRegistry | None = None):
        self.registry = registry

    def can_render(self, path: Path) -> bool:
        return path.suffix.lower() == ".mdx"

    def render(
        self,
        content: str,
        path: Path,
        base_url: str = "",
        _stack: tuple[Path, ...] = (),
    ) -> str:
        """Render MDX content to HTML.

        Args:
            content: MDX source without frontmatter.
            path: Path of the source file; includes resolve against its folder.
            base_url: Publish path relative images are resolved against.

        Returns:
            Rendered HTML.

        Raises:
            RenderError: If an included file is missing or includes itself.
        """
        stack = _stack or (path.resolve(),)
        includes: dict[str, str] = {}
        body = strip_mdx_esm(content)
        for index, (name, source) in enumerate(extract_mdx_imports(content).items()):
            target = (path.parent / source).resolve()
            if target in stack:
                raise RenderError(f"{path}: include cycle through {source}")
            if not target.exists():
                raise RenderError(f"{path}: included file not found: {source}")
            token = _INCLUDE_TOKEN.format(index=index)
            body, count = _expand_tag(body, name, token)
            if not count:
                continue
            includes[token] = self._render_include(
                target, _include_base_url(base_url, source), stack + (target,)
            )

        html = super().render(body, path, base_url)
        for token, included in includes.items():
            html = html.replace(f"<p>{token}</p>\n", included).replace(token, included)
        return html

    def _render_include(self, target: Path, base_url: str, stack: tuple[Path, ...]) -> str:
        _, body = extract_frontmatter(target.read_text(encoding="utf-8"))
        registry = self.registry or default_renderer_registry
        renderer = registry.get_renderer(target)
        if isinstance(renderer, MdxRenderer):
            return renderer.render(body, target, base_url, _stack=stack)
        return renderer.render(body, target, base_url)


def _expand_tag(body: str, name: str, token: str) -> tuple[str, int]:
    """Replace ``<Name />`` tags outside fenced code with a placeholder line."""
    pattern = re.compile(rf"<{name}\s*/>")
    lines: list[str] = []
    total = 0
    for line, fenced in iter_fenced_lines(body):
        if not fenced:
            line, count = pattern.subn(f"\n\n{token}\n\n", line)
            total += count
        lines.append(line)
    return "".join(lines), total


def _include_base_url(base_url: str, source: str) -> str:
    """Return the image base for an included file relative to its includer."""
    folder = Path(source).parent.as_posix()
    if not base_url or folder in ("", "."):
        return base_url
    if folder.startswith(".."):
        return ""
    return f"{base_url.rstrip('/')}/{folder.removeprefix('./')}"


class RendererRegistry:
    """Registry for content renderers.

    New renderers can be registered without modifying existing code.
    """

    def __init__(self):
        self._renderers: list = []
        self.register(MdxRenderer(self))
        self.register(MarkdownRenderer())

    def register(self, renderer) -> None:
        self._renderers.append(renderer)

    def get_renderer(self, path: Path):
        """Get the first renderer that can handle the file.

        Raises:
            RenderError: If no renderer handles the file type.
        """
        for renderer in self._renderers:
            if renderer.can_render(path):
                return renderer
        raise RenderError(f"No renderer for {path}")

    def render(self, body: str, path: Path, base_url: str = "") -> str:
        """Render a document body with the renderer for its file type."""
        return self.get_renderer(path).render(body, path, base_url)


# Default renderer registry instance
default_renderer_registry = RendererRegistry()
