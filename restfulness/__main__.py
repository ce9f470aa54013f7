"""Allow ``python -m restfulness``."""

import sys

from restfulness.cli import main

sys.exit(main())
