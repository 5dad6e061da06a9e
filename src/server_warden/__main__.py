"""Allow ``python -m server_warden``."""

import sys

from .cli import main

sys.exit(main())
