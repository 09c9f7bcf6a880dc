"""Main entry point for textoutline package.

This module allows the package to be executed as:
    python -m textoutline [args...]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
