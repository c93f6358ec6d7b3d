"""Site building functionality for Pagewright.

This module contains the core logic for building the blog from source files.
It loads configuration, indexes content, registers one page per published
post, renders the pages and writes the output.

Key functions:
- build_site: Main function to build the entire site.
- generate_pages: Run only the page-registration step.
- load_config: Loads site configuration from pagewright.yaml.
"""

from __future__ import annotations

import copy
import functools
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateSyntaxError

from .assets import AssetPipeline
from .content import ContentDocument, ContentIndex, SiteMetadata
from .log import get_logger
from .pages import (
    BLOG_POST_TEMPLATE,
    DEFAULT_SOCIAL_SEARCH_URL,
    DEFAULT_SOURCE_SUFFIX,
    GeneratedPage,
    PageRegistry,
    create_pages,
)
from .templates import TemplateEngine
from .utils import ensure_clean_dir

logger = get_logger(__name__)

CONFIG_FILENAME = "pagewright.yaml"


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class ConfigError(ValueError):
    """Raised when pagewright.yaml holds a value that cannot be used."""


DEFAULT_CONFIG: dict[str, Any] = {
    "output_dir": "public",
    "content_dir": "content",
    "templates_dir": "templates",
    "static_dir": "static",
    "query_limit": 1000,
    "social_search_url": DEFAULT_SOCIAL_SEARCH_URL,
    "source_suffix": DEFAULT_SOURCE_SUFFIX,
    "site": {
        "title": "",
        "root_url": "",
        "repo_root_url": "",
    },
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        pages: Registered pages, in registration order.
        output_dir: Directory where the site was built.
        site: Site metadata used for the build.
    """

    pages: list[GeneratedPage]
    output_dir: Path
    site: SiteMetadata


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from pagewright.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
        The ``site`` mapping is merged key by key.

    Raises:
        ConfigError: If a configured value has the wrong type.
    """
    config_path = project_root / CONFIG_FILENAME
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            site = loaded.pop("site", None)
            config.update(loaded)
            if isinstance(site, dict):
                config["site"].update(site)
    _validate_config(config, config_path)
    return config


def _validate_config(config: dict[str, Any], config_path: Path) -> None:
    """Check value types in a merged configuration, normalizing query_limit.

    Raises:
        ConfigError: If a value cannot be used.
    """
    for key in ("output_dir", "content_dir", "templates_dir", "static_dir"):
        value = config[key]
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"{config_path.name}: {key} must be a non-empty path, got {value!r}")
    for key in ("social_search_url", "source_suffix"):
        if not isinstance(config[key], str):
            raise ConfigError(f"{config_path.name}: {key} must be a string, got {config[key]!r}")
    limit = config["query_limit"]
    message = f"{config_path.name}: query_limit must be an integer, got {limit!r}"
    if isinstance(limit, bool) or not isinstance(limit, (int, str)):
        raise ConfigError(message)
    try:
        config["query_limit"] = int(limit)
    except ValueError as exc:
        raise ConfigError(message) from exc
    if config["query_limit"] < 0:
        raise ConfigError(f"{config_path.name}: query_limit must not be negative")


def load_site_metadata(config: dict[str, Any], root_url: str | None = None) -> SiteMetadata:
    """Build SiteMetadata from configuration, applying a root URL override."""
    site = SiteMetadata.from_mapping(config.get("site"))
    if root_url is not None:
        site = replace(site, root_url=root_url)
    return site


def generate_pages(
    project_root: Path,
    config: dict[str, Any] | None = None,
    root_url: str | None = None,
) -> tuple[PageRegistry, ContentIndex]:
    """Index content and register one page per published post.

    Args:
        project_root: Root directory of the project.
        config: Loaded configuration; read from disk when omitted.
        root_url: Optional override for the site's root URL.

    Returns:
        Tuple of (page registry, content index).

    Raises:
        FileNotFoundError: If the content directory is missing.
        PageGenerationError: If indexing reported errors.
    """
    project_root = project_root.resolve()
    config = config or load_config(project_root)
    site = load_site_metadata(config, root_url)
    content_dir = project_root / config["content_dir"]
    if not content_dir.exists():
        raise FileNotFoundError(f"Expected content directory at {content_dir}")

    index = ContentIndex(content_dir, site)
    registry = PageRegistry()
    create_pages(
        functools.partial(index.query, int(config["query_limit"])),
        registry.create_page,
        project_root,
        component=BLOG_POST_TEMPLATE,
        social_search_template=str(config["social_search_url"]),
        source_suffix=str(config["source_suffix"]),
    )
    logger.debug("Registered %d pages", len(registry))
    return registry, index


def build_site(
    project_root: Path,
    root_url: str | None = None,
    clean_output: bool = True,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Build the entire static site.

    Pages are generated before the output directory is touched, so a failed
    content query leaves any previous build in place.

    Args:
        project_root: Root directory of the project.
        root_url: Optional override for the site's root URL.
        clean_output: Whether to wipe the output directory before building.
        output_dir_override: Optional path to write the build output instead
            of config output_dir.

    Returns:
        BuildResult containing registered pages, output directory and site.

    Raises:
        PageGenerationError: If the content query reported errors.
        BuildError: If a page fails to render.
    """
    project_root = project_root.resolve()
    config = load_config(project_root)
    registry, index = generate_pages(project_root, config, root_url)
    site = index.site

    output_dir = output_dir_override or (project_root / config["output_dir"])
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    assets = AssetPipeline(project_root / config["static_dir"], output_dir)
    assets.run()

    engine = TemplateEngine(project_root / config["templates_dir"], site)
    documents = _published_documents(index, int(config["query_limit"]))
    for page in registry:
        document = documents.get(page.path)
        if document is None:
            raise BuildError(project_root, f"No document is published at {page.path}")
        try:
            rendered = engine.render_page(page, document)
        except TemplateSyntaxError as exc:
            raise BuildError(
                Path(exc.filename or page.component),
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except Exception as exc:
            raise BuildError(
                document.source_path,
                _format_error_message(exc),
                exc,
            ) from exc
        _write_page(output_dir, page.path, rendered)
        assets.copy_post_assets(document.source_path, page.path)

    if "/" not in registry:
        posts = index.documents.published().sorted()
        _write_page(output_dir, "/", engine.render_index(posts))

    logger.debug("Built %d pages into %s", len(registry), output_dir)
    return BuildResult(pages=list(registry), output_dir=output_dir, site=site)


def _published_documents(index: ContentIndex, limit: int) -> dict[str, ContentDocument]:
    """Map publish paths to documents, the later of two duplicates winning.

    Walks the same query the page generator consumed, so a page renders the
    document whose registration the registry kept.
    """
    return {
        document.frontmatter.path: document
        for document in index.query(limit).documents
        if document.frontmatter.path
    }


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateNotFound":
        return f"Template not found: {error_msg}"
    if error_type == "RenderError":
        return error_msg

    return f"{error_type}: {error_msg}"


def _write_page(output_dir: Path, url_path: str, rendered: str) -> None:
    """Write a rendered page to ``<output_dir>/<url_path>/index.html``.

    Args:
        output_dir: Base output directory.
        url_path: Publish path of the page.
        rendered: Rendered HTML content.
    """
    target_dir = output_dir / url_path.strip("/")
    target_dir.mkdir(parents=True, exist_ok=True)
    html_path = target_dir / "index.html"
    with open(html_path, "w", encoding="utf-8") as f:
        f.write(rendered)
