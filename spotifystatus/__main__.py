"""Allow ``python -m spotifystatus``."""

import sys

from .cli import main

sys.exit(main())
