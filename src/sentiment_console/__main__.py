"""Allow ``python -m sentiment_console``."""

import sys

from sentiment_console.cli import main

sys.exit(main())
