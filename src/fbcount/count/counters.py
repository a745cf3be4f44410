"""Per cell barcode counters and threshold filtered summaries.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import Any, Hashable, Mapping, NamedTuple, Optional, TypeVar

from fbcount.types import Barcode, BarcodeRecordIndex, CellCode

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class SummaryRow(NamedTuple):
    """Reads and cells for one barcode, over the cells passing the read threshold."""

    total_reads: int
    cell_count: int

    @property
    def reads_per_cell(self) -> int:
        """Return the (truncated) average number of reads per cell."""
        if self.cell_count == 0:
            return 0
        return self.total_reads // self.cell_count


class RunCounters:
    """Counters of the classification outcomes of all read pairs in a run.

    :ivar not_whitelisted: reads with a cell code missing from the whitelist
    :ivar ignored: reads with a barcode on the ignore list
    :ivar nohit: reads without a matching panel barcode
    :ivar ambiguous: reads matching more than one panel barcode
    :ivar exact: reads with an exact panel barcode match
    :ivar corrected: reads matched to a panel barcode after error correction
    :ivar distance_distribution: number of matched reads per edit distance
    """

    def __init__(self):
        """Initialize the RunCounters object."""
        self.not_whitelisted = 0
        self.ignored = 0
        self.nohit = 0
        self.ambiguous = 0
        self.exact = 0
        self.corrected = 0
        self.distance_distribution: Counter[int] = Counter()

    @property
    def counted(self) -> int:
        """Return the number of reads credited to a panel barcode."""
        return self.exact + self.corrected

    @property
    def discarded(self) -> int:
        """Return the number of reads not credited to any panel barcode."""
        return self.not_whitelisted + self.ignored + self.nohit + self.ambiguous

    @property
    def input(self) -> int:
        """Return the total number of reads processed."""
        return self.counted + self.discarded

    def __iadd__(self, other):
        """Merge counters from another object into this one."""
        if isinstance(other, RunCounters):
            self.not_whitelisted += other.not_whitelisted
            self.ignored += other.ignored
            self.nohit += other.nohit
            self.ambiguous += other.ambiguous
            self.exact += other.exact
            self.corrected += other.corrected
            self.distance_distribution += other.distance_distribution
            return self

        return NotImplemented

    def collect(self) -> dict[str, Any]:
        """Return a dictionary with the counters."""
        return {
            "input_reads": self.input,
            "counted_reads": self.counted,
            "exact_reads": self.exact,
            "corrected_reads": self.corrected,
            "nohit_reads": self.nohit,
            "ambiguous_reads": self.ambiguous,
            "not_whitelisted_reads": self.not_whitelisted,
            "ignored_reads": self.ignored,
            "matches_distance_distribution": dict(
                sorted(self.distance_distribution.items())
            ),
        }

    def __repr__(self) -> str:
        """Return a string representation of the object."""
        return (
            f"<RunCounters [input={self.input} counted={self.counted}"
            f" discarded={self.discarded}]>"
        )


def _summarize(
    cells: Mapping[CellCode, Mapping[K, int]], min_reads_per_cell: int
) -> dict[K, SummaryRow]:
    reads: Counter = Counter()
    cell_counts: Counter = Counter()

    for cell in cells.values():
        for key, count in cell.items():
            if count > min_reads_per_cell:
                reads[key] += count
                cell_counts[key] += 1

    return {key: SummaryRow(reads[key], cell_counts[key]) for key in reads}


def filter_summary(
    summary: Mapping[K, SummaryRow],
    min_reads: int,
    min_cells: int,
    reads_per_cell: Optional[int] = None,
) -> set[K]:
    """Select the barcodes of a summary that pass all thresholds.

    A barcode passes when it is found in at least `min_cells` cells, has more
    than `min_reads` reads in total and, if `reads_per_cell` is given, more
    than `reads_per_cell` reads per cell on average (integer division).

    :param summary: the output of :meth:`CountAggregator.summarize`
    :param min_reads: the total read threshold (exclusive)
    :param min_cells: the cell count threshold (inclusive)
    :param reads_per_cell: the optional reads per cell threshold (exclusive)
    :returns: the keys passing the thresholds
    """
    return {
        key
        for key, row in summary.items()
        if row.cell_count >= min_cells
        and row.total_reads > min_reads
        and (
            reads_per_cell is None
            or (row.cell_count > 0 and row.reads_per_cell > reads_per_cell)
        )
    }


class CountAggregator:
    """Read counts per cell code and panel barcode.

    Counts are only ever incremented. Summaries are computed on demand and
    do not modify the counters, so they can be taken repeatedly during a run.
    """

    def __init__(self, count_unknown: bool = False):
        """Initialize empty counters.

        :param count_unknown: also count the raw barcodes of reads without
            a panel match
        """
        self._cells: defaultdict[CellCode, Counter[BarcodeRecordIndex]] = defaultdict(
            Counter
        )
        self._unknown: defaultdict[CellCode, Counter[Barcode]] | None = (
            defaultdict(Counter) if count_unknown else None
        )
        self.run = RunCounters()

    @property
    def count_unknown(self) -> bool:
        """Return True if unknown barcodes are counted."""
        return self._unknown is not None

    @property
    def cells(self) -> int:
        """Return the number of cell codes with at least one counted read."""
        return len(self._cells)

    def record_hit(
        self, cell: CellCode, ref_index: BarcodeRecordIndex, distance: int = 0
    ) -> None:
        """Count one read of a panel barcode in a cell.

        :param cell: the cell code of the read
        :param ref_index: the panel index of the matched barcode
        :param distance: the edit distance of the match, 0 for exact matches
        """
        self._cells[cell][ref_index] += 1
        if distance == 0:
            self.run.exact += 1
        else:
            self.run.corrected += 1
        self.run.distance_distribution[distance] += 1

    def record_unknown(self, cell: CellCode, raw: Barcode) -> None:
        """Count one read of a barcode missing from the panel in a cell.

        :raises RuntimeError: if unknown barcodes are not counted
        """
        if self._unknown is None:
            raise RuntimeError("Counting of unknown barcodes is not enabled")
        self._unknown[cell][raw] += 1

    def record_not_whitelisted(self) -> None:
        """Count one read with a cell code missing from the whitelist."""
        self.run.not_whitelisted += 1

    def record_ignored(self) -> None:
        """Count one read with an ignored barcode."""
        self.run.ignored += 1

    def record_nohit(self) -> None:
        """Count one read without a panel match."""
        self.run.nohit += 1

    def record_ambiguous(self) -> None:
        """Count one read matching more than one panel barcode."""
        self.run.ambiguous += 1

    def count(self, cell: CellCode, ref_index: BarcodeRecordIndex) -> int:
        """Return the number of reads of a panel barcode in a cell."""
        counter = self._cells.get(cell)
        return counter[ref_index] if counter is not None else 0

    def summarize(self, min_reads_per_cell: int) -> dict[BarcodeRecordIndex, SummaryRow]:
        """Summarize reads and cells per panel barcode.

        Only the cells with more than `min_reads_per_cell` reads of a barcode
        contribute to the totals of that barcode.

        :param min_reads_per_cell: the per cell read threshold (exclusive)
        :returns: a summary row per panel index
        """
        return _summarize(self._cells, min_reads_per_cell)

    def unknown_summary(self, min_reads_per_cell: int) -> dict[Barcode, SummaryRow]:
        """Summarize reads and cells per unknown barcode.

        Same threshold semantics as :meth:`summarize`. Empty when unknown
        barcodes are not counted.
        """
        if self._unknown is None:
            return {}
        return _summarize(self._unknown, min_reads_per_cell)

    def __iadd__(self, other):
        """Merge the counts of another aggregator into this one."""
        if isinstance(other, CountAggregator):
            for cell, counter in other._cells.items():
                self._cells[cell].update(counter)
            if other._unknown is not None:
                if self._unknown is None:
                    self._unknown = defaultdict(Counter)
                for cell, unknown in other._unknown.items():
                    self._unknown[cell].update(unknown)
            self.run += other.run
            return self

        return NotImplemented

    def __repr__(self) -> str:
        """Return a string representation of the object."""
        return f"<CountAggregator [cells={self.cells} run={self.run!r}]>"
