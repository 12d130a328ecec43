"""
Domain models for the histogram log processor.

Pure data structures with validation, no business logic.
"""

from .config import ProcessorConfig, HistogramConfig, HGRM_SUFFIX
from .intervals import TimeWindow, IntervalHistogram
from .rows import IntervalRow, PercentilePoint
from .statistics import RunStatistics
from .errors import ProcessorError, InputOpenError

__all__ = [
    "ProcessorConfig",
    "HistogramConfig",
    "HGRM_SUFFIX",
    "TimeWindow",
    "IntervalHistogram",
    "IntervalRow",
    "PercentilePoint",
    "RunStatistics",
    "ProcessorError",
    "InputOpenError",
]
