"""Allow ``python -m superspace``."""
import sys

from superspace.cli.main import main

sys.exit(main())
