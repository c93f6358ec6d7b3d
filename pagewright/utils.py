"""Utility functions for Pagewright.

This module contains small string and path helpers used throughout the
Pagewright codebase.

Key functions:
    slugify: Convert titles or filenames to URL slugs.
    titleize: Convert filenames to human-readable titles.
    encode_uri_component: Percent-encode a string for use in a query value.
    strip_first: Remove the first occurrence of a substring.
    join_root_url: Join a base URL with a path.
    is_content_file: Check if a path is a Markdown or MDX document.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from urllib.parse import quote

CONTENT_SUFFIXES = (".md", ".mdx")

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_."
_URI_COMPONENT_SAFE = "!~*'()"


def slugify(name: str) -> str:
    """Convert a title or filename stem to a slug, dropping any date prefix.

    Args:
        name: Title or filename stem.

    Returns:
        URL-friendly slug.

    Examples:
        >>> slugify("2024-01-02 Hello, World!")
        'hello-world'
    """
    cleaned = name.strip()
    parts = re.split(r"[-\s]+", cleaned)
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        cleaned = "-".join(parts[3:])
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("getting-started.mdx")
        'Getting Started'
    """
    base = Path(filename).stem
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def encode_uri_component(value: str) -> str:
    """Percent-encode a string the way JavaScript's encodeURIComponent does.

    Args:
        value: Raw string.

    Returns:
        Encoded string with only ``A-Z a-z 0-9 - _ . ! ~ * ' ( )`` left as is.

    Examples:
        >>> encode_uri_component("https://example.com/a b")
        'https%3A%2F%2Fexample.com%2Fa%20b'
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)


def strip_first(text: str, pattern: str) -> str:
    """Remove the first occurrence of ``pattern`` from ``text``.

    A missing or empty pattern leaves the text unchanged.
    """
    if not pattern:
        return text
    return text.replace(pattern, "", 1)


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com/', 'about')
        'https://example.com/about'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def is_content_file(path: Path) -> bool:
    """Check if a path is a Markdown or MDX document."""
    return path.suffix.lower() in CONTENT_SUFFIXES


def is_hidden_path(path: Path) -> bool:
    """Check if any component of a relative path starts with ``_`` or ``.``."""
    return any(part.startswith(("_", ".")) for part in path.parts)


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path), ignore_errors=True)
        if path.exists():
            # Fallback for stubborn directories
            for item in path.rglob("*"):
                if item.is_file():
                    item.unlink()
            for item in sorted(
                [p for p in path.rglob("*") if p.is_dir()], reverse=True
            ):
                item.rmdir()
            path.rmdir()
    path.mkdir(parents=True, exist_ok=True)
