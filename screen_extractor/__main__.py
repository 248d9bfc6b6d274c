"""Allow ``python -m screen_extractor``."""

import sys

from screen_extractor.cli import main

sys.exit(main())
