"""Allow running as ``python -m skyscrape``."""

import sys

from skyscrape.cli import main

if __name__ == '__main__':
    sys.exit(main())
