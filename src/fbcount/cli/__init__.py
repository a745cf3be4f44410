"""Copyright © 2025 Pixelgen Technologies AB."""

from fbcount.cli.main import main_cli

__all__ = ["main_cli"]
