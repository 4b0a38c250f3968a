"""Allow ``python -m ecoregistry``."""

from __future__ import annotations

import sys

from ecoregistry.cli import main

sys.exit(main())
