"""Allow running as ``python -m pm`` (used by the fzf preview)."""

import sys

from .cli.main import main

sys.exit(main())
