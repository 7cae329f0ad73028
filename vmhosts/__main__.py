"""Module entry point: ``python -m vmhosts CONFIG``."""

from __future__ import annotations

import sys

from vmhosts.cli import main

if __name__ == "__main__":
    sys.exit(main())
