"""
Shared test fixtures.

Provides an in-memory Histogram implementation, a scripted interval
source, and helpers that build real HdrHistogram log text.
"""

from typing import Iterable, Iterator, Optional

import numpy as np
import pytest

from histlog.domain.config import HistogramConfig
from histlog.domain.intervals import IntervalHistogram, TimeWindow
from histlog.domain.rows import PercentilePoint
from histlog.services.histogram import Histogram, HdrHistogramAdapter
from histlog.services.log_reader import IntervalSource


class InMemoryHistogram(Histogram):
    """Exact histogram over a plain array of values."""

    def __init__(self, values: Iterable[float] = ()):
        self.values = np.asarray(list(values), dtype=float)

    def add(self, other: Histogram) -> None:
        self.values = np.concatenate([self.values, other.values])

    @property
    def total_count(self) -> int:
        return int(self.values.size)

    @property
    def max_value(self) -> float:
        return float(self.values.max()) if self.values.size else 0.0

    def value_at_percentile(self, percentile: float) -> float:
        if not self.values.size:
            return 0.0
        return float(np.percentile(self.values, percentile, method="inverted_cdf"))

    @property
    def mean_value(self) -> float:
        return float(self.values.mean()) if self.values.size else 0.0

    @property
    def stddev(self) -> float:
        return float(self.values.std()) if self.values.size else 0.0

    def percentile_points(self, ticks_per_half_distance: int) -> Iterator[PercentilePoint]:
        if not self.values.size:
            return
        distinct, counts = np.unique(self.values, return_counts=True)
        cumulative = np.cumsum(counts)
        for value, total in zip(distinct, cumulative):
            yield PercentilePoint(
                value=float(value),
                percentile=100.0 * int(total) / self.total_count,
                total_count=int(total),
            )

    @property
    def bucket_count(self) -> int:
        return 1

    @property
    def sub_bucket_count(self) -> int:
        return 256


class ScriptedSource(IntervalSource):
    """
    Interval source replaying prepared intervals.

    ``start_times`` gives the log start time the source reports after
    each pull; the last entry sticks. Window filtering follows the log
    reader: skip before the window, stop at the first interval past it.
    """

    def __init__(self, intervals: list[IntervalHistogram], start_times: list[float]):
        self._intervals = list(intervals)
        self._start_times = list(start_times) or [0.0]
        self._position = 0
        self._start_time_sec = 0.0
        self.pulls = 0

    @property
    def start_time_sec(self) -> float:
        return self._start_time_sec

    def next_interval(self, window: TimeWindow) -> Optional[IntervalHistogram]:
        self.pulls += 1
        while self._position < len(self._intervals):
            interval = self._intervals[self._position]
            index = min(self._position, len(self._start_times) - 1)
            self._start_time_sec = self._start_times[index]
            self._position += 1

            offset = interval.start_timestamp_ms / 1000.0 - self._start_time_sec
            if window.is_before(offset):
                continue
            if window.is_past(offset):
                return None
            return interval
        return None


def make_interval(values: Iterable[float], start_sec: float, length_sec: float = 1.0) -> IntervalHistogram:
    """Interval over an in-memory histogram."""
    return IntervalHistogram(
        histogram=InMemoryHistogram(values),
        start_timestamp_ms=start_sec * 1000.0,
        end_timestamp_ms=(start_sec + length_sec) * 1000.0,
    )


def encode_values(values: Iterable[int], config: Optional[HistogramConfig] = None) -> str:
    """Base64 compressed HdrHistogram payload holding ``values``."""
    histogram = HdrHistogramAdapter.create(config or HistogramConfig())
    for value in values:
        histogram.record_value(int(value))
    return histogram.encode()


def build_log_text(
    intervals: list[tuple],
    start_time_sec: Optional[float] = 1000000000.0,
    legend: bool = True
) -> str:
    """
    Textual histogram log.

    Args:
        intervals: (timestamp_sec, length_sec, values) or
            (timestamp_sec, length_sec, values, tag) tuples
        start_time_sec: Value of the StartTime header, None for no header
        legend: Include the column legend line
    """
    lines = []
    if start_time_sec is not None:
        lines.append(
            "#[StartTime: %.3f (seconds since epoch), Sun Sep 09 01:46:40 UTC 2001]" % start_time_sec
        )
    if legend:
        lines.append('"StartTimestamp","Interval_Length","Interval_Max","Interval_Compressed_Histogram"')
    for entry in intervals:
        timestamp, length, values = entry[:3]
        tag = entry[3] if len(entry) > 3 else None
        max_ms = max(values) / 1e6 if values else 0.0
        line = "%.3f,%.3f,%.3f,%s" % (timestamp, length, max_ms, encode_values(values))
        if tag:
            line = f"Tag={tag},{line}"
        lines.append(line)
    return "\n".join(lines) + "\n"


def uniform_ms_values(count: int = 10) -> list[int]:
    """``count`` nanosecond values spread uniformly over [1ms, 2ms]."""
    step = 1_000_000 // (count - 1)
    return [1_000_000 + i * step for i in range(count)]


@pytest.fixture
def two_interval_log() -> str:
    """Two 1-second intervals of 10 values each in [1ms, 2ms]."""
    values = uniform_ms_values(10)
    return build_log_text([(0.0, 1.0, values), (1.0, 1.0, values)])
