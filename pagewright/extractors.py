"""Metadata extractors for Pagewright.

This module pulls structured metadata out of raw document text. Problems
are raised as FrontmatterError so the content index can report them as
query errors instead of aborting the scan.

Key functions:
- extract_frontmatter: Split YAML frontmatter from the document body.
- parse_date: Normalize a frontmatter date value to a naive datetime.
- extract_mdx_imports: Find sibling-document imports in MDX source.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)

# import Part2 from "./part2.mdx";
MDX_IMPORT_RE = re.compile(
    r"""^import\s+(?P<name>[A-Z][A-Za-z0-9_]*)\s+from\s+["'](?P<source>[^"']+\.mdx?)["'];?\s*$""",
)

# Top-level ESM statements in MDX; these never reach the Markdown renderer.
MDX_ESM_RE = re.compile(r"^(?:import|export)\s")


class FrontmatterError(ValueError):
    """Raised when a document's frontmatter cannot be interpreted."""


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (frontmatter dict, remaining content). Documents without a
        frontmatter block return an empty dict and the text unchanged.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid frontmatter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Frontmatter must be a mapping, got {type(data).__name__}"
        )
    return data, text[match.end() :]


def parse_date(value: Any) -> datetime | None:
    """Normalize a frontmatter date to a naive datetime.

    YAML already turns unquoted ISO dates into ``date``/``datetime``; quoted
    strings are parsed with ``datetime.fromisoformat``. Aware values are
    converted to UTC so all dates compare against each other.

    Args:
        value: Raw frontmatter value.

    Returns:
        datetime, or None when the value is missing.

    Raises:
        FrontmatterError: If the value cannot be read as a date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise FrontmatterError(f"Invalid date: {value!r}") from exc
    else:
        raise FrontmatterError(f"Invalid date: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def iter_fenced_lines(body: str):
    """Yield (line, fenced) pairs, marking lines of fenced code blocks.

    The opening and closing fence lines count as fenced.
    """
    fence: str | None = None
    for line in body.splitlines(keepends=True):
        stripped = line.lstrip()
        if fence is None and stripped.startswith(("```", "~~~")):
            fence = stripped[:3]
            yield line, True
            continue
        if fence is not None:
            if stripped.startswith(fence):
                fence = None
            yield line, True
            continue
        yield line, False


def _bracket_depth(line: str) -> int:
    return sum(line.count(c) for c in "([{") - sum(line.count(c) for c in ")]}")


def _iter_esm_lines(body: str):
    """Yield (line, is_esm) pairs, ignoring statements inside fenced code.

    A statement whose brackets are still open at the end of its first line
    continues until they close, e.g. ``export const meta = {`` ... ``}``.
    """
    depth = 0
    for line, fenced in iter_fenced_lines(body):
        if depth > 0:
            depth += _bracket_depth(line)
            yield line, True
            continue
        if not fenced and MDX_ESM_RE.match(line):
            depth = max(_bracket_depth(line), 0)
            yield line, True
            continue
        yield line, False


def extract_mdx_imports(body: str) -> dict[str, str]:
    """Map component names to the sibling documents they import.

    Args:
        body: MDX source without frontmatter.

    Returns:
        Dictionary of component name to relative source path.
    """
    imports: dict[str, str] = {}
    for line, is_esm in _iter_esm_lines(body):
        if not is_esm:
            continue
        match = MDX_IMPORT_RE.match(line.strip())
        if match:
            imports[match.group("name")] = match.group("source")
    return imports


def strip_mdx_esm(body: str) -> str:
    """Remove top-level import/export lines from MDX source."""
    return "".join(line for line, is_esm in _iter_esm_lines(body) if not is_esm)
