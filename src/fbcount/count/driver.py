"""Classify read pairs and route them into the counters.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Callable, Container, Iterable, Optional, assert_never

from fbcount.constants import PROGRESS_INTERVAL
from fbcount.count.counters import CountAggregator
from fbcount.resolve.index import (
    Ambiguous,
    ApproxHit,
    BarcodeResolutionIndex,
    MatchOutcome,
    NoHit,
    Unique,
)
from fbcount.types import Barcode, CellCode

logger = logging.getLogger(__name__)


class StreamDriver:
    """Apply the per read policy to a stream of (cell code, barcode) pairs.

    For every read pair, in order:

    1. a cell code missing from the whitelist is counted as not whitelisted
    2. a barcode on the ignore list is counted as ignored
    3. the barcode is resolved against the panel and the outcome is counted

    The whitelist and ignore checks are cheap set lookups and come before
    the (possibly approximate) barcode resolution.
    """

    def __init__(
        self,
        index: BarcodeResolutionIndex,
        counts: CountAggregator,
        whitelist: Optional[Container[CellCode]] = None,
        ignore: Optional[AbstractSet[Barcode]] = None,
        approximate: bool = False,
    ):
        """Initialize the driver.

        :param index: the barcode resolution index of the panel
        :param counts: the counters to update
        :param whitelist: the accepted cell codes, or None to accept all
        :param ignore: barcodes to discard before resolution
        :param approximate: allow approximate barcode matches
        """
        self.index = index
        self.counts = counts
        self.whitelist = whitelist
        self.ignore = frozenset(ignore) if ignore else frozenset()
        self.approximate = approximate

    def process(self, cell_code: CellCode, barcode: Barcode) -> MatchOutcome | None:
        """Classify and count one read pair.

        :param cell_code: the cell code from read 1
        :param barcode: the feature barcode from read 2
        :returns: the match outcome, or None if the read was filtered out
            before resolution
        """
        counts = self.counts

        if self.whitelist is not None and cell_code not in self.whitelist:
            counts.record_not_whitelisted()
            return None

        if barcode in self.ignore:
            counts.record_ignored()
            return None

        outcome = self.index.resolve(barcode, self.approximate)
        if isinstance(outcome, Unique):
            counts.record_hit(cell_code, outcome.index)
        elif isinstance(outcome, ApproxHit):
            counts.record_hit(cell_code, outcome.index, distance=outcome.distance)
        elif isinstance(outcome, NoHit):
            if counts.count_unknown:
                counts.record_unknown(cell_code, barcode)
            counts.record_nohit()
        elif isinstance(outcome, Ambiguous):
            counts.record_ambiguous()
        else:
            assert_never(outcome)

        return outcome

    def run(
        self,
        read_pairs: Iterable[tuple[CellCode, Barcode]],
        progress: Optional[Callable[[int], None]] = None,
        progress_interval: int = PROGRESS_INTERVAL,
    ) -> int:
        """Process all read pairs of a stream.

        :param read_pairs: an iterable of (cell code, barcode) pairs
        :param progress: called with the number of processed read pairs
            every `progress_interval` read pairs
        :param progress_interval: the number of read pairs between progress calls
        :returns: the number of read pairs processed
        """
        if progress_interval < 1:
            raise ValueError("progress_interval must be at least one")

        n_reads = 0
        _process = self.process
        for cell_code, barcode in read_pairs:
            _process(cell_code, barcode)
            n_reads += 1

            if progress is not None and n_reads % progress_interval == 0:
                progress(n_reads)

        logger.debug("Processed %d read pairs", n_reads)
        return n_reads
