# SPDX-License-Identifier: MIT
"""Allow running as python -m pwinres."""

import sys

from pwinres.cli import main

sys.exit(main())
