"""
This module contains helper typehints for the fbcount package.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Union

# type alias for path-like objects
PathType = Union[str, Path, PurePath, os.PathLike]

# a barcode or a cell code as read from the sequencer
Barcode = bytes
CellCode = bytes

# position of a record in the reference panel
BarcodeRecordIndex = int
