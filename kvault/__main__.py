"""Allow ``python -m kvault``."""

from __future__ import annotations

import sys

from kvault.cli import main

sys.exit(main())
