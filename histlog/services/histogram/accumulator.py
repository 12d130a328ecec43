"""
HistogramAccumulator service - Accumulates interval histograms.

Single responsibility: Maintain the running merge of all processed
intervals for one run.
"""

from histlog.domain.intervals import IntervalHistogram
from .base import Histogram


class CumulativeView:
    """Read-only access to the accumulated histogram."""

    def __init__(self, histogram: Histogram):
        self._histogram = histogram

    @property
    def total_count(self) -> int:
        return self._histogram.total_count

    @property
    def max_value(self) -> float:
        return self._histogram.max_value

    def value_at_percentile(self, percentile: float) -> float:
        return self._histogram.value_at_percentile(percentile)


class HistogramAccumulator:
    """
    Merges interval histograms into one long-lived histogram.

    Strictly accumulating: there is no removal, decay or reset. The
    cumulative view always reflects every merge made before it is read.
    """

    def __init__(self, histogram: Histogram):
        """
        Initialize accumulator.

        Args:
            histogram: Empty histogram to accumulate into
        """
        if histogram.total_count != 0:
            raise ValueError(
                f"accumulator must start empty, got total_count={histogram.total_count}"
            )

        self._histogram = histogram
        self._view = CumulativeView(histogram)

    def merge(self, interval: IntervalHistogram) -> None:
        """
        Add every recorded value of an interval into the running histogram.

        Args:
            interval: Decoded interval histogram
        """
        self._histogram.add(interval.histogram)

    @property
    def cumulative_view(self) -> CumulativeView:
        """Read-only view over everything merged so far."""
        return self._view

    @property
    def histogram(self) -> Histogram:
        """Accumulated histogram, for rendering the final distribution."""
        return self._histogram

    @property
    def total_count(self) -> int:
        """Total number of values merged so far."""
        return self._histogram.total_count
