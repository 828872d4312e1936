"""Entry point: python -m magic_header generate LIGHT DARK [-o OUT]."""

import sys

from magic_header.cli import main

sys.exit(main())
