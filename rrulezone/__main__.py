"""Entry point for `python -m rrulezone` command."""

import sys

from rrulezone.cli import main

if __name__ == "__main__":
    sys.exit(main())
