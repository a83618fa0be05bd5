"""Allow running as ``python -m team_challenge``."""

import sys

from .cli import main

sys.exit(main())
