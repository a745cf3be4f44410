"""Reference panel of feature barcodes.

The panel is a cellranger style feature reference file with the columns
``id,name,read,pattern,sequence,feature_type``.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import dataclasses
import logging
from collections import defaultdict
from functools import cached_property
from pathlib import Path
from typing import IO, Iterable, List, Optional

import pandas as pd

from fbcount.constants import (
    DEFAULT_BARCODE_LENGTH,
    PANEL_COLUMNS,
    PANEL_SEQUENCE_COLUMN,
)
from fbcount.exception import PanelValidationError
from fbcount.types import Barcode, BarcodeRecordIndex, PathType

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class ReferenceRecord:
    """One row of the reference panel."""

    id: str
    name: str
    read: str
    pattern: str
    sequence: str
    feature_type: str

    @property
    def barcode(self) -> Barcode:
        """Return the sequence as bytes."""
        return self.sequence.encode("utf-8")


class ReferencePanel:
    """Class representing a feature barcode reference panel.

    Records are addressed by their position in the panel file
    (a :data:`BarcodeRecordIndex`).
    """

    def __init__(
        self,
        df: pd.DataFrame,
        barcode_length: int = DEFAULT_BARCODE_LENGTH,
        file_name: Optional[str] = None,
        reject_duplicates: bool = False,
    ) -> None:
        """Load a panel from a dataframe.

        :param df: The dataframe containing the panel rows, all columns as strings.
        :param barcode_length: The required length of every barcode.
        :param file_name: The optional basename of the file from which
            the panel is loaded.
        :param reject_duplicates: Treat duplicated barcodes as an error instead
            of a warning.
        :raises PanelValidationError: if the panel is invalid
        """
        errors = self.validate_panel(
            df, barcode_length=barcode_length, reject_duplicates=reject_duplicates
        )
        if len(errors) > 0:
            raise PanelValidationError(errors, file_name)

        self._df = df.reset_index(drop=True)
        self._filename = file_name
        self._barcode_length = barcode_length

        for barcode, rows in self.duplicated_barcodes().items():
            logger.warning(
                "Barcode %s is found in panel rows %s, only row %d will be counted",
                barcode.decode(),
                ", ".join(str(r + 1) for r in rows),
                rows[-1] + 1,
            )

    @classmethod
    def from_csv(
        cls,
        filename: PathType,
        barcode_length: int = DEFAULT_BARCODE_LENGTH,
        reject_duplicates: bool = False,
    ) -> ReferencePanel:
        """Create a ReferencePanel from a csv panel file.

        :param filename: The path to the panel file.
        :param barcode_length: The required length of every barcode.
        :param reject_duplicates: Fail on duplicated barcodes.
        :returns: The ReferencePanel object.
        :raises PanelValidationError: if the file is missing or invalid
        """
        panel_file = Path(filename)

        if not panel_file.is_file():
            raise PanelValidationError(["Panel file not found"], filename)

        logger.debug("Creating reference panel from file %s", filename)

        try:
            df = pd.read_csv(
                str(panel_file), dtype=str, keep_default_na=False, na_values=[""]
            )
        except pd.errors.EmptyDataError:
            raise PanelValidationError(["Panel file is empty"], filename)
        except (pd.errors.ParserError, UnicodeDecodeError) as exc:
            raise PanelValidationError([f"Malformed panel file: {exc}"], filename)

        panel = cls(
            df,
            barcode_length=barcode_length,
            file_name=panel_file.name,
            reject_duplicates=reject_duplicates,
        )
        logger.debug("Reference panel from file %s created", filename)
        return panel

    @staticmethod
    def validate_panel(
        panel_df: pd.DataFrame,
        barcode_length: int = DEFAULT_BARCODE_LENGTH,
        reject_duplicates: bool = False,
    ) -> list[str]:
        """Validate the panel dataframe.

        :param panel_df: The dataframe containing the panel rows.
        :param barcode_length: The required length of every barcode.
        :param reject_duplicates: Report duplicated barcodes as errors.
        :returns: A list of errors found in the panel.
        """
        errors: list[str] = []

        columns = [str(c) for c in panel_df.columns]
        if columns != PANEL_COLUMNS:
            errors.append(
                f"Header error: expected header {','.join(PANEL_COLUMNS)}"
                f" but found {','.join(columns)}"
            )
            return errors

        if panel_df.shape[0] == 0:
            errors.append("Panel file is empty")
            return errors

        panel_df = panel_df.reset_index(drop=True)
        missing = panel_df.isna()
        for row_number, (row_missing, sequence) in enumerate(
            zip(missing.itertuples(index=False), panel_df[PANEL_SEQUENCE_COLUMN]), 1
        ):
            missing_columns = [c for c, m in zip(PANEL_COLUMNS, row_missing) if m]
            if missing_columns:
                errors.append(
                    f"Row {row_number}: missing value(s) for {', '.join(missing_columns)}"
                )
                continue

            size = len(str(sequence).encode("utf-8"))
            if size != barcode_length:
                errors.append(
                    f"Row {row_number}: barcode {sequence!r} in column "
                    f"'{PANEL_SEQUENCE_COLUMN}' has length {size}, "
                    f"expected {barcode_length}"
                )

        if reject_duplicates:
            duplicated = panel_df[PANEL_SEQUENCE_COLUMN].duplicated(keep=False)
            for sequence, group in panel_df[duplicated].groupby(
                PANEL_SEQUENCE_COLUMN, sort=True
            ):
                rows = ", ".join(str(i + 1) for i in group.index)
                errors.append(f"Barcode {sequence} is duplicated in rows {rows}")

        return errors

    @cached_property
    def records(self) -> List[ReferenceRecord]:
        """Return the panel rows as records, ordered by index."""
        return [
            ReferenceRecord(*row)
            for row in self._df[PANEL_COLUMNS].itertuples(index=False, name=None)
        ]

    @cached_property
    def barcodes(self) -> List[Barcode]:
        """Return the barcode of every record, ordered by index."""
        return [r.barcode for r in self.records]

    def record(self, index: BarcodeRecordIndex) -> ReferenceRecord:
        """Return the record at the given index."""
        return self.records[index]

    def duplicated_barcodes(self) -> dict[Barcode, list[BarcodeRecordIndex]]:
        """Return the barcodes found on more than one row, with their rows."""
        positions: dict[Barcode, list[int]] = defaultdict(list)
        for index, barcode in enumerate(self.barcodes):
            positions[barcode].append(index)
        return {k: v for k, v in positions.items() if len(v) > 1}

    @property
    def filename(self) -> Optional[str]:
        """Return the filename of the panel."""
        return self._filename

    @property
    def barcode_length(self) -> int:
        """Return the length of the panel barcodes."""
        return self._barcode_length

    @property
    def size(self) -> int:
        """Return the number of records in the panel."""
        return self._df.shape[0]

    def write_csv(
        self, indices: Iterable[BarcodeRecordIndex], path_or_buf: PathType | IO[str]
    ) -> None:
        """Write the selected records using the panel column schema.

        Records are sorted by their id.

        :param indices: the records to write
        :param path_or_buf: a file path or an open text buffer
        """
        positions = sorted(set(indices))
        selected = self._df.iloc[positions].sort_values("id", kind="stable")
        selected.to_csv(
            path_or_buf, index=False, columns=PANEL_COLUMNS, lineterminator="\n"
        )
