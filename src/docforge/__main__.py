"""Allow ``python -m docforge``."""

import sys

from docforge.cli import main

sys.exit(main())
