"""Allow ``python -m treels``."""

import sys

from .cli import main

sys.exit(main())
