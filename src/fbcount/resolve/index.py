"""Resolve observed barcodes against the reference panel.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Sequence, Union

from fbcount.config.panel import ReferencePanel
from fbcount.constants import MAX_EDIT_DISTANCE
from fbcount.resolve.correction import (
    BKTree,
    BKTreeItem,
    build_bktree,
    build_exact_dict_lookup,
)
from fbcount.types import Barcode, BarcodeRecordIndex

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class NoHit:
    """No panel barcode matches the query."""


@dataclasses.dataclass(frozen=True, slots=True)
class Unique:
    """The query is identical to a panel barcode."""

    index: BarcodeRecordIndex


@dataclasses.dataclass(frozen=True, slots=True)
class ApproxHit:
    """Exactly one panel barcode is within the allowed edit distance."""

    index: BarcodeRecordIndex
    distance: int


@dataclasses.dataclass(frozen=True, slots=True)
class Ambiguous:
    """More than one panel barcode is within the allowed edit distance."""


MatchOutcome = Union[NoHit, Unique, ApproxHit, Ambiguous]

NO_HIT = NoHit()
AMBIGUOUS = Ambiguous()


class BarcodeResolutionIndex:
    """Exact and error tolerant lookup of barcodes in a reference panel.

    Exact matches are found with a dictionary lookup. When approximate
    matching is requested, the distinct panel barcodes are searched in a
    BK-tree for all values within `max_distance` edits of the query.
    A query close to more than one panel barcode is ambiguous and is never
    credited to any of them.
    """

    def __init__(
        self, barcodes: Sequence[Barcode], max_distance: int = MAX_EDIT_DISTANCE
    ):
        """Build the index.

        :param barcodes: the panel barcodes ordered by panel index
        :param max_distance: the maximum edit distance of an approximate match
        :raises ValueError: if max_distance is negative
        """
        if max_distance < 0:
            raise ValueError("max_distance must be a non-negative integer")

        self.max_distance = max_distance
        self._size = len(barcodes)
        self._exact_lookup = build_exact_dict_lookup(barcodes)
        self._tree: BKTree = build_bktree(self._exact_lookup)

        logger.debug(
            "Built barcode index with %d distinct barcodes out of %d records",
            len(self._exact_lookup),
            self._size,
        )

    @classmethod
    def from_panel(
        cls, panel: ReferencePanel, max_distance: int = MAX_EDIT_DISTANCE
    ) -> BarcodeResolutionIndex:
        """Build the index from a reference panel."""
        return cls(panel.barcodes, max_distance=max_distance)

    def __len__(self) -> int:
        """Return the number of distinct barcodes in the index."""
        return len(self._exact_lookup)

    def __contains__(self, barcode: Barcode) -> bool:
        """Return True if the barcode matches a panel barcode exactly."""
        return barcode in self._exact_lookup

    def resolve(self, query: Barcode, allow_approximate: bool) -> MatchOutcome:
        """Resolve an observed barcode to a panel record.

        :param query: the observed barcode
        :param allow_approximate: search for barcodes within `max_distance`
            edits when there is no exact match
        :returns: the match outcome
        """
        index = self._exact_lookup.get(query)
        if index is not None:
            return Unique(index)

        if not allow_approximate:
            return NO_HIT

        hits = self._tree.find(query, self.max_distance)
        if len(hits) == 0:
            return NO_HIT

        if len(hits) > 1:
            return AMBIGUOUS

        distance, item = hits[0]
        assert isinstance(item, BKTreeItem)
        return ApproxHit(item.id, distance)
