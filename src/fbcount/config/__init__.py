"""Copyright © 2025 Pixelgen Technologies AB."""

from fbcount.config.layout import CountThresholds, ReadLayout
from fbcount.config.panel import ReferencePanel, ReferenceRecord

__all__ = [
    "CountThresholds",
    "ReadLayout",
    "ReferencePanel",
    "ReferenceRecord",
]
