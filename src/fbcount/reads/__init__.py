"""Copyright © 2025 Pixelgen Technologies AB."""

from fbcount.reads.reader import PairedReadReader
from fbcount.reads.whitelist import Whitelist

__all__ = ["PairedReadReader", "Whitelist"]
