"""Allow running as ``python -m paramstore``."""

import sys

from paramstore.main import main

sys.exit(main())
