"""Copyright © 2025 Pixelgen Technologies AB."""

import sys

from fbcount.cli.main import main_cli

if __name__ == "__main__":
    sys.exit(main_cli())  # pragma: no cover
