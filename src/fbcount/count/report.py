"""Report models for the count step.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Self

import pydantic


class SampleReport(pydantic.BaseModel):
    """Base class for all fbcount sample reports.

    :ivar sample_id: The sample id for which the report is generated.
    """

    sample_id: str

    @classmethod
    def from_json(cls, p: Path) -> Self:
        """Initialize a :class:`SampleReport` from a report file.

        :param p: The path to the report file.
        :return: A :class:`SampleReport` object.
        """
        with open(p) as fp:
            json_data = json.load(fp)

        return cls(**json_data)

    def write_json_file(self, p: str | os.PathLike, **kwargs: Any) -> None:
        """Write a JSON serialized SampleReport to a file.

        Non-existing intermediate directories in the path will be created.

        :param p: The path to the file to write.
        :param kwargs: Additional arguments to pass to pydantics `model_dump_json`.
        """
        Path(p).resolve().parent.mkdir(parents=True, exist_ok=True)

        with open(p, "w") as fp:
            r = self.model_dump_json(**kwargs)
            fp.write(r)


class CountSampleReport(SampleReport):
    """Model for a count sample report."""

    input_reads: int = pydantic.Field(
        ..., description="The number of read pairs processed."
    )
    counted_reads: int = pydantic.Field(
        ...,
        description="The number of reads credited to a panel barcode.\nThis corresponds to exact_reads + corrected_reads.",
    )
    exact_reads: int = pydantic.Field(
        ...,
        description="The number of reads with a barcode identical to a panel barcode.",
    )
    corrected_reads: int = pydantic.Field(
        ...,
        description="The number of reads credited to a panel barcode after error correction.",
    )
    nohit_reads: int = pydantic.Field(
        ..., description="The number of reads without a matching panel barcode."
    )
    ambiguous_reads: int = pydantic.Field(
        ...,
        description="The number of reads with more than one panel barcode within the allowed edit distance.",
    )
    not_whitelisted_reads: int = pydantic.Field(
        ...,
        description="The number of reads with a cell code missing from the whitelist.",
    )
    ignored_reads: int = pydantic.Field(
        ..., description="The number of reads with a barcode on the ignore list."
    )
    matches_distance_distribution: dict[int, int] = pydantic.Field(
        ..., description="The number of matched reads per edit distance."
    )
    cells: int = pydantic.Field(
        ..., description="The number of cell codes with at least one counted read."
    )
    passed_barcodes: list[str] = pydantic.Field(
        ...,
        description="The ids of the panel barcodes passing all count thresholds.",
    )
