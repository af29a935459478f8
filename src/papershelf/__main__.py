"""Entry point for ``python -m papershelf``."""

import sys

from papershelf.app import main

if __name__ == "__main__":
    sys.exit(main())
