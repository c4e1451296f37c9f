"""Allow `python -m chronoplan` to run the CLI."""

import sys

from chronoplan.main import main

sys.exit(main())
