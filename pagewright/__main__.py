"""Entry point for the Pagewright CLI.

This module serves as the main entry point when running the pagewright
package directly with ``python -m pagewright``.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
