"""
Histogram services.

The histogram capability, its HdrHistogram implementation and the
running accumulator.
"""

from .base import Histogram
from .hdr_adapter import HdrHistogramAdapter
from .accumulator import HistogramAccumulator, CumulativeView

__all__ = [
    "Histogram",
    "HdrHistogramAdapter",
    "HistogramAccumulator",
    "CumulativeView",
]
