"""Allow ``python -m mjml_import``."""

import sys

from mjml_import.cli import main

sys.exit(main())
