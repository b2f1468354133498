"""Allow running the fileblob CLI via ``python -m fileblob``."""

import sys

from fileblob.cli import main

sys.exit(main())
