"""Read cell codes and feature barcodes from paired FASTQ files.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

import dnaio
from dnaio import FileFormatError, UnknownFileFormat

from fbcount.config.layout import ReadLayout
from fbcount.exception import ReadPairError
from fbcount.types import Barcode, CellCode, PathType

logger = logging.getLogger(__name__)


class PairedReadReader:
    """Iterate over (cell code, barcode) pairs of a pair of FASTQ files.

    The cell code is taken from read 1 and the feature barcode from read 2,
    at the positions given by the :class:`ReadLayout`. Compressed files are
    supported through dnaio (gzip, bzip2, xz and zstd).

    Use as a context manager::

        with PairedReadReader(r1, r2, layout) as reader:
            for cell_code, barcode in reader:
                ...
    """

    def __init__(
        self, r1: PathType, r2: PathType, layout: Optional[ReadLayout] = None
    ):
        """Initialize the reader.

        :param r1: the read 1 FASTQ file holding the cell codes
        :param r2: the read 2 FASTQ file holding the feature barcodes
        :param layout: the positions of the cell code and barcode
        """
        self.r1 = Path(r1)
        self.r2 = Path(r2)
        self.layout = layout or ReadLayout()
        self._reader = None

    def open(self) -> None:
        """Open the underlying files.

        :raises ReadPairError: if the files cannot be opened as FASTQ
        """
        try:
            self._reader = dnaio.open(str(self.r1), str(self.r2), mode="r")
        except (FileFormatError, UnknownFileFormat, EOFError, OSError) as exc:
            raise ReadPairError(
                f"Could not open read files {self.r1} and {self.r2}: {exc}"
            ) from exc
        logger.debug("Opened read files %s and %s", self.r1, self.r2)

    def close(self) -> None:
        """Close the underlying files."""
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def __enter__(self) -> PairedReadReader:
        """Open the files."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Close the files."""
        self.close()
        return False

    def __iter__(self) -> Iterator[tuple[CellCode, Barcode]]:
        """Yield the cell code and feature barcode of every read pair.

        :raises ReadPairError: if the files are improperly paired, corrupt,
            or a read is too short for the configured layout
        """
        if self._reader is None:
            self.open()

        layout = self.layout
        cell_code_slice = layout.cell_code_slice
        barcode_slice = layout.barcode_slice
        cell_code_length = layout.cell_code_length
        barcode_length = layout.barcode_length

        read_number = 0
        try:
            for read_number, (read1, read2) in enumerate(self._reader, 1):  # type: ignore
                cell_code = read1.sequence[cell_code_slice].encode("ascii")
                if len(cell_code) != cell_code_length:
                    raise ReadPairError(
                        f"Read 1 '{read1.name}' of length {len(read1.sequence)} is too "
                        f"short for a cell code at positions "
                        f"{cell_code_slice.start}-{cell_code_slice.stop}",
                        read_number,
                    )

                barcode = read2.sequence[barcode_slice].encode("ascii")
                if len(barcode) != barcode_length:
                    raise ReadPairError(
                        f"Read 2 '{read2.name}' of length {len(read2.sequence)} is too "
                        f"short for a barcode at positions "
                        f"{barcode_slice.start}-{barcode_slice.stop}",
                        read_number,
                    )

                yield cell_code, barcode
        except FileFormatError as exc:
            raise ReadPairError(
                f"Malformed read files {self.r1} and {self.r2}: {exc}",
                read_number + 1,
            ) from exc
        except (EOFError, OSError) as exc:
            raise ReadPairError(
                f"Could not read {self.r1} and {self.r2}: {exc}", read_number + 1
            ) from exc
