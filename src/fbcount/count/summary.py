"""Tables and result files summarizing the counts of a run.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import logging
from typing import IO

import click
import pandas as pd

from fbcount.config.layout import CountThresholds
from fbcount.config.panel import ReferencePanel
from fbcount.constants import UNKNOWN_TOP
from fbcount.count.counters import CountAggregator, filter_summary
from fbcount.count.report import CountSampleReport
from fbcount.types import BarcodeRecordIndex, PathType
from fbcount.utils import click_echo

logger = logging.getLogger(__name__)

MATCHES_COLUMNS = ["name", "barcode", "reads", "cells", "reads_per_cell", "passed"]
UNKNOWN_COLUMNS = ["barcode", "reads", "cells"]


class CountSummary:
    """Read-only view of the counters of a run combined with the panel.

    The summary is recomputed on every call, so the same object can be used
    for live progress tables and for the final results.
    """

    def __init__(
        self,
        panel: ReferencePanel,
        counts: CountAggregator,
        thresholds: CountThresholds | None = None,
    ):
        """Initialize the summary.

        :param panel: the reference panel the counts refer to
        :param counts: the run counters
        :param thresholds: the count thresholds, defaults are used if None
        """
        self.panel = panel
        self.counts = counts
        self.thresholds = thresholds or CountThresholds()

    def passing_indices(self) -> set[BarcodeRecordIndex]:
        """Return the panel indices passing all thresholds."""
        t = self.thresholds
        return filter_summary(
            self.counts.summarize(t.min_reads),
            min_reads=t.min_reads,
            min_cells=t.min_cells,
            reads_per_cell=t.reads_per_cell,
        )

    def matches_table(self) -> pd.DataFrame:
        """Return reads and cells per panel barcode, most read first."""
        t = self.thresholds
        summary = self.counts.summarize(t.min_reads)
        passing = filter_summary(
            summary,
            min_reads=t.min_reads,
            min_cells=t.min_cells,
            reads_per_cell=t.reads_per_cell,
        )

        rows = []
        for index, row in summary.items():
            record = self.panel.record(index)
            rows.append(
                (
                    record.name,
                    record.sequence,
                    row.total_reads,
                    row.cell_count,
                    row.reads_per_cell,
                    index in passing,
                )
            )

        df = pd.DataFrame(rows, columns=MATCHES_COLUMNS)
        return df.sort_values(
            ["reads", "barcode"], ascending=[False, True], kind="stable"
        ).reset_index(drop=True)

    def unknown_table(self, top: int = UNKNOWN_TOP) -> pd.DataFrame:
        """Return the `top` most read barcodes that are missing from the panel."""
        summary = self.counts.unknown_summary(self.thresholds.min_reads)
        rows = [
            (barcode.decode(errors="replace"), row.total_reads, row.cell_count)
            for barcode, row in summary.items()
        ]
        df = pd.DataFrame(rows, columns=UNKNOWN_COLUMNS)
        df = df.sort_values(
            ["reads", "barcode"], ascending=[False, True], kind="stable"
        ).reset_index(drop=True)
        return df.head(top)

    def print_matches(self, clear: bool = False) -> None:
        """Print the matches table followed by the run counters.

        :param clear: clear the terminal first, used for live updates
        """
        if clear:
            click.clear()

        table = self.matches_table()
        if table.empty:
            click_echo("No barcodes counted")
        else:
            click_echo(table.to_string(index=False))

        run = self.counts.run
        click_echo(
            f"nohit: {run.nohit}, ambiguous: {run.ambiguous}, "
            f"not_whitelisted: {run.not_whitelisted}, ignored: {run.ignored}"
        )

    def print_unknown(self, top: int = UNKNOWN_TOP) -> None:
        """Print the most read barcodes that are missing from the panel."""
        table = self.unknown_table(top)
        click_echo(f"Top {top} unknown barcodes")
        if table.empty:
            click_echo("No unknown barcodes counted")
        else:
            click_echo(table.to_string(index=False))

    def write_csv(self, path_or_buf: PathType | IO[str]) -> None:
        """Write the passing panel records in the panel file format."""
        passing = self.passing_indices()
        logger.info("Writing %d passing barcodes", len(passing))
        self.panel.write_csv(passing, path_or_buf)

    def to_report(self, sample_id: str) -> CountSampleReport:
        """Create a report of the run counters and the passing barcodes."""
        passed = sorted(self.panel.record(i).id for i in self.passing_indices())
        return CountSampleReport(
            sample_id=sample_id,
            cells=self.counts.cells,
            passed_barcodes=passed,
            **self.counts.run.collect(),
        )
