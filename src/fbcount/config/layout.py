"""Read layout and count threshold settings.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

from typing import Optional

import pydantic
from pydantic import NonNegativeInt, PositiveInt

from fbcount.constants import (
    DEFAULT_BARCODE_LENGTH,
    DEFAULT_BARCODE_OFFSET,
    DEFAULT_CELL_CODE_LENGTH,
    DEFAULT_CELL_CODE_OFFSET,
    DEFAULT_MIN_CELLS,
    DEFAULT_MIN_READS,
)


class ReadLayout(pydantic.BaseModel):
    """Position of the cell code and the feature barcode in a read pair.

    The cell code is taken from read 1 and the feature barcode from read 2.

    :ivar cell_code_length: the length of the cell code
    :ivar cell_code_offset: the start of the cell code in read 1
    :ivar barcode_length: the length of the feature barcode
    :ivar barcode_offset: the start of the feature barcode in read 2
    """

    model_config = pydantic.ConfigDict(frozen=True)

    cell_code_length: PositiveInt = DEFAULT_CELL_CODE_LENGTH
    cell_code_offset: NonNegativeInt = DEFAULT_CELL_CODE_OFFSET
    barcode_length: PositiveInt = DEFAULT_BARCODE_LENGTH
    barcode_offset: NonNegativeInt = DEFAULT_BARCODE_OFFSET

    @property
    def cell_code_slice(self) -> slice:
        """Return the slice of read 1 holding the cell code."""
        return slice(
            self.cell_code_offset, self.cell_code_offset + self.cell_code_length
        )

    @property
    def barcode_slice(self) -> slice:
        """Return the slice of read 2 holding the feature barcode."""
        return slice(self.barcode_offset, self.barcode_offset + self.barcode_length)


class CountThresholds(pydantic.BaseModel):
    """Thresholds used to decide which panel barcodes are reported.

    :ivar min_reads: only count a barcode in a cell if it has more reads than this
    :ivar min_cells: only report barcodes found in at least this many cells
    :ivar reads_per_cell: only report barcodes with more reads per cell than this
    """

    model_config = pydantic.ConfigDict(frozen=True)

    min_reads: NonNegativeInt = DEFAULT_MIN_READS
    min_cells: NonNegativeInt = DEFAULT_MIN_CELLS
    reads_per_cell: Optional[NonNegativeInt] = None
