"""BKTree implementation for error tolerant barcode matching.

Copyright © 2025 Pixelgen Technologies AB.
"""

import logging
from collections import deque
from operator import itemgetter
from typing import Callable, Iterable, Mapping, Sequence

import edlib

from fbcount.types import Barcode, BarcodeRecordIndex

logger = logging.getLogger(__name__)

__all__ = [
    "BKTree",
    "BKTreeItem",
    "build_bktree",
    "build_exact_dict_lookup",
    "levenshtein_distance",
]

_getitem0 = itemgetter(0)


class BKTreeItem:
    """Small helper class to store the sequence and the panel index in the BKTree."""

    __slots__ = ["id", "sequence"]

    def __init__(self, id: BarcodeRecordIndex, sequence: Barcode):
        self.id = id
        self.sequence = sequence

    def __repr__(self):
        return f"BKTreeItem({self.id}, {self.sequence!r})"


def levenshtein_distance(s1: BKTreeItem | bytes, s2: BKTreeItem | bytes) -> int:
    """Calculate the Levenshtein distance between two byte sequences.

    Substitutions, insertions and deletions all count as one edit.
    Bytes are compared as opaque symbols.

    >>> levenshtein_distance(b"ACGTACGT", b"ACGTACGT")
    0
    >>> levenshtein_distance(b"ACGTACGT", b"ACCTACGT")
    1
    >>> levenshtein_distance(b"ACGTACGT", b"CGTACGTA")
    2
    >>> levenshtein_distance(BKTreeItem(0, b"acgt"), b"ACGT")
    4
    """
    b1 = s1.sequence if isinstance(s1, BKTreeItem) else s1
    b2 = s2.sequence if isinstance(s2, BKTreeItem) else s2
    if b1 == b2:
        return 0
    return edlib.align(b1, b2, mode="NW", task="distance")["editDistance"]


class BKTree:
    """BK-tree data structure.

    The BK-tree allows fast querying of matches that are
    "close" given a function to calculate a distance metric (e.g., Hamming
    distance or Levenshtein distance).

    Each node in the tree (including the root node) is a two-tuple of
    (item, children_dict), where children_dict is a dict whose keys are
    non-negative distances of the child to the current item and whose values
    are nodes.

    Adapted from: https://github.com/Jetsetter/pybktree
    License: MIT
    """

    def __init__(self, distance_func: Callable[..., int], items: Iterable = ()):
        """Initialize a BKTree instance with given distance function.

        The distance function should be a callable that takes two items
        and returns a non-negative distance integer,

        :param distance_func: The distance function to use.
        :param items: An optional iterable of items to add on initialization.

        >>> tree = BKTree(levenshtein_distance)
        >>> list(tree)
        []
        >>> tree = BKTree(levenshtein_distance, [b"AAAA", b"AAAT", b"TTTT"])
        >>> sorted(tree)
        [b'AAAA', b'AAAT', b'TTTT']
        """
        self.distance_func = distance_func
        self.tree = None
        self._size = 0

        _add = self.add
        for item in items:
            _add(item)

    def add(self, item) -> None:
        """Add given item to this tree.

        >>> tree = BKTree(levenshtein_distance)
        >>> tree.add(b"ACGT")
        >>> tree.add(b"ACGA")
        >>> sorted(tree)
        [b'ACGA', b'ACGT']
        """
        self._size += 1
        node = self.tree
        if node is None:
            self.tree = (item, {})
            return

        # Slight speed optimization -- avoid lookups inside the loop
        _distance_func = self.distance_func

        while True:
            parent, children = node
            distance = _distance_func(item, parent)
            node = children.get(distance)
            if node is None:
                children[distance] = (item, {})
                break

    def find(self, item, n: int) -> list[tuple[int, object]]:
        """Find items in this tree with a distance <= `n` from `item`.

        Return list of (distance, item) tuples ordered by distance.

        :param item: The item to find matches for.
        :param n: The maximum distance to consider a match.

        >>> tree = BKTree(levenshtein_distance)
        >>> tree.find(b"ACGT", 1)
        []
        >>> for seq in [b"AAAA", b"AAAT", b"AATT", b"TTTT"]:
        ...     tree.add(seq)
        >>> tree.find(b"AAAT", 1)
        [(0, b'AAAT'), (1, b'AAAA'), (1, b'AATT')]
        """
        if self.tree is None:
            return []

        candidates = deque([self.tree])
        found = []

        # Slight speed optimization -- avoid lookups inside the loop
        _candidates_popleft = candidates.popleft
        _candidates_extend = candidates.extend
        _found_append = found.append
        _distance_func = self.distance_func

        while candidates:
            candidate, children = _candidates_popleft()
            distance = _distance_func(candidate, item)
            if distance <= n:
                _found_append((distance, candidate))

            if children:
                lower = distance - n
                upper = distance + n
                _candidates_extend(
                    c for d, c in children.items() if lower <= d <= upper
                )

        found.sort(key=_getitem0)
        return found

    def __iter__(self):
        """Return iterator over all items in this tree.

        Items are yielded in arbitrary order.
        """
        if self.tree is None:
            return

        candidates = deque([self.tree])

        # Slight speed optimization -- avoid lookups inside the loop
        _candidates_popleft = candidates.popleft
        _candidates_extend = candidates.extend

        while candidates:
            candidate, children = _candidates_popleft()
            yield candidate
            _candidates_extend(children.values())

    def __len__(self) -> int:
        """Return the number of items in the tree."""
        return self._size

    def __repr__(self):
        """Return a string representation of this BK-tree with a little bit of info.

        >>> BKTree(levenshtein_distance)
        <BKTree using levenshtein_distance with no top-level nodes>
        """
        return "<{} using {} with {} top-level nodes>".format(
            self.__class__.__name__,
            self.distance_func.__name__,
            len(self.tree[1]) if self.tree is not None else "no",
        )


def build_exact_dict_lookup(
    barcodes: Sequence[Barcode],
) -> dict[Barcode, BarcodeRecordIndex]:
    """Create a lookup table from barcode to panel index.

    When a barcode occurs more than once the last index wins.

    :param barcodes: the panel barcodes ordered by index
    :return: The lookup table
    """
    lut: dict[Barcode, BarcodeRecordIndex] = dict()

    for index, barcode in enumerate(barcodes):
        if barcode in lut:
            logger.debug(
                "Barcode %s at index %d replaces index %d",
                barcode.decode(errors="replace"),
                index,
                lut[barcode],
            )
        lut[barcode] = index

    return lut


def build_bktree(lookup: Mapping[Barcode, BarcodeRecordIndex]) -> BKTree:
    """Create a BKTree from the distinct panel barcodes.

    Each item keeps the index the exact lookup maps its barcode to.
    The distance function is the Levenshtein distance.

    :param lookup: the exact lookup table of the panel
    :return: The BKTree
    """
    tree = BKTree(levenshtein_distance)

    for barcode, index in lookup.items():
        tree.add(BKTreeItem(index, barcode))

    return tree
