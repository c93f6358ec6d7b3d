"""Command-line interface for Pagewright.

This module defines the CLI commands using Click framework.

Commands:
- new: Scaffold a new Pagewright project.
- build: Build the site into the output directory.
- pages: List the pages a build would generate.
- post: Create a new post interactively.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .log import configure_logging
from .utils import slugify

# Path to the files copied into new projects
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold"


@click.group()
@click.version_option(version=__version__, prog_name="pagewright")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Pagewright static blog generator."""
    configure_logging(logging.DEBUG if verbose else logging.INFO)


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new Pagewright project."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Pagewright site created at {target}")


@cli.command()
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Write the site here instead of the configured output_dir",
)
@click.option("--root-url", help="Override site.root_url from pagewright.yaml")
def build(output_dir: Path | None, root_url: str | None):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, ConfigError, build_site
    from .pages import PageGenerationError

    try:
        result = build_site(
            project_root, root_url=root_url, output_dir_override=output_dir
        )
    except PageGenerationError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        for error in exc.errors:
            click.echo(click.style(f"  {error}", fg="yellow"), err=True)
        raise SystemExit(1) from None
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {_display_path(exc.source_path, project_root)}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Built {len(result.pages)} pages into {result.output_dir}")


@cli.command()
@click.option("--root-url", help="Override site.root_url from pagewright.yaml")
def pages(root_url: str | None):
    """List the pages a build would generate."""
    from .build import ConfigError, generate_pages
    from .pages import PageGenerationError

    try:
        registry, _ = generate_pages(Path.cwd(), root_url=root_url)
    except PageGenerationError as exc:
        raise click.ClickException(str(exc)) from exc
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    for page in registry:
        click.echo(f"{page.path} -> {page.context['source_url']}")
    click.echo(f"{len(registry)} pages")


@cli.command()
def post():
    """Create a new post interactively."""
    project_root = Path.cwd()
    from .build import ConfigError, load_config

    try:
        config = load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    content_dir = project_root / config["content_dir"]
    if not content_dir.exists():
        raise click.ClickException(
            "No content directory found. Run this command from a Pagewright project root."
        )

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    slug = questionary.text(
        "Slug:",
        default=slugify(title),
        validate=lambda x: slugify(x) == x.strip() or "Use lowercase letters, digits and dashes",
        style=_questionary_style(),
    ).ask()
    if slug is None:
        raise click.Abort()
    slug = slug.strip()

    description = questionary.text(
        "Description (optional):", style=_questionary_style()
    ).ask()
    if description is None:
        raise click.Abort()

    target_dir = content_dir / slug
    if target_dir.exists():
        raise click.ClickException(
            f"A post with slug '{slug}' already exists: {target_dir.relative_to(project_root)}"
        )

    target_dir.mkdir(parents=True)
    target_path = target_dir / "index.mdx"
    target_path.write_text(
        _post_template(title, slug, description.strip()), encoding="utf-8"
    )
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _post_template(title: str, slug: str, description: str) -> str:
    """Return the source of a new post."""
    lines = [
        "---",
        f"path: /{slug}",
        f"title: {_yaml_scalar(title)}",
        f"date: {datetime.now().strftime('%Y-%m-%d')}",
    ]
    if description:
        lines.append(f"description: {_yaml_scalar(description)}")
    lines.extend(["---", "", ""])
    return "\n".join(lines)


def _yaml_scalar(value: str) -> str:
    """Quote a frontmatter value so YAML reads it back as the same string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _display_path(path: Path, project_root: Path) -> Path:
    try:
        return path.relative_to(project_root.resolve())
    except ValueError:
        return path


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Create the directory structure and files for a new Pagewright project.

    Args:
        root: Root directory for the new project.
    """
    for src_path in _SCAFFOLD_DIR.rglob("*"):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(_SCAFFOLD_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)

    (root / "templates").mkdir(parents=True, exist_ok=True)
    (root / "static").mkdir(parents=True, exist_ok=True)
    (root / ".gitignore").write_text("public/\n", encoding="utf-8")

    _try_git_init(root)


def _try_git_init(root: Path) -> None:
    """Initialize a git repository if git is available."""
    if os.environ.get("PAGEWRIGHT_SKIP_GIT_INIT") == "1":
        return
    git_bin = shutil.which("git")
    if not git_bin:
        return
    try:
        subprocess.run(
            [git_bin, "init"],
            cwd=root,
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError):
        # Non-fatal: user can run git init manually
        pass
