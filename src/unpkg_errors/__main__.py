"""
Entry point for module execution (``python -m unpkg_errors``).

This module delegates execution to the CLI handler in ``unpkg_errors.cli.__main__``.
"""

import sys
from unpkg_errors.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
