"""
Entry point for running outrider as a module.

Usage:
    python -m outrider scan ./src
    python -m outrider --help
"""

import sys
from outrider.cli import main

if __name__ == "__main__":
    sys.exit(main())
