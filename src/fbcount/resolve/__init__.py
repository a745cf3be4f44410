"""Copyright © 2025 Pixelgen Technologies AB."""

from fbcount.resolve.correction import BKTree, BKTreeItem, levenshtein_distance
from fbcount.resolve.index import (
    AMBIGUOUS,
    NO_HIT,
    Ambiguous,
    ApproxHit,
    BarcodeResolutionIndex,
    MatchOutcome,
    NoHit,
    Unique,
)

__all__ = [
    "AMBIGUOUS",
    "Ambiguous",
    "ApproxHit",
    "BarcodeResolutionIndex",
    "BKTree",
    "BKTreeItem",
    "levenshtein_distance",
    "MatchOutcome",
    "NO_HIT",
    "NoHit",
    "Unique",
]
