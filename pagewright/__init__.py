"""Pagewright static blog generator.

Pagewright indexes a tree of Markdown/MDX posts with YAML frontmatter,
registers one page per post that declares a publish path, and renders each
page through a shared blog-post template wrapped in the site layout. It runs
once per build and exits.

The main entry point is the CLI module, which provides commands for
scaffolding projects, creating posts and building sites.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
