"""Static file handling for Pagewright.

Copies the project's static directory into the output root and the files
that live next to each post (images, downloads) into the post's output
directory, so relative references in a post keep working.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from .log import get_logger
from .utils import is_content_file, is_hidden_path

logger = get_logger(__name__)


class AssetPipeline:
    """Copies static files into the build output.

    Attributes:
        static_dir: Directory copied as-is into the output root.
        output_dir: Directory where the site is built.
    """

    def __init__(self, static_dir: Path, output_dir: Path):
        self.static_dir = static_dir
        self.output_dir = output_dir

    def run(self) -> int:
        """Copy the static directory into the output root.

        Returns:
            Number of files copied.
        """
        if not self.static_dir.exists():
            return 0
        return self._copy_tree(self.static_dir, self.output_dir, skip_content=False)

    def copy_post_assets(self, source_file: Path, url_path: str) -> int:
        """Copy the files beside a post into its output directory.

        Only posts that own their folder (``<slug>/index.md[x]``) have assets;
        a post stored as a single file shares its folder with other posts.

        Args:
            source_file: The post's source file.
            url_path: The post's publish path.

        Returns:
            Number of files copied.
        """
        if source_file.stem != "index":
            return 0
        target = self.output_dir / url_path.strip("/")
        return self._copy_tree(source_file.parent, target, skip_content=True)

    def _copy_tree(self, source: Path, target: Path, skip_content: bool) -> int:
        copied = 0
        for item in sorted(source.rglob("*")):
            if item.is_dir():
                continue
            rel = item.relative_to(source)
            if is_hidden_path(rel) or (skip_content and is_content_file(item)):
                continue
            dest = target / rel
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest)
            copied += 1
        logger.debug("Copied %d files from %s to %s", copied, source, target)
        return copied
