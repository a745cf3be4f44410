"""Copyright © 2025 Pixelgen Technologies AB."""

from fbcount.count.counters import (
    CountAggregator,
    RunCounters,
    SummaryRow,
    filter_summary,
)
from fbcount.count.driver import StreamDriver
from fbcount.count.report import CountSampleReport
from fbcount.count.summary import CountSummary

__all__ = [
    "CountAggregator",
    "CountSampleReport",
    "CountSummary",
    "RunCounters",
    "StreamDriver",
    "SummaryRow",
    "filter_summary",
]
