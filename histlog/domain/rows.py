"""
Report row domain models.

Numeric content of interval log rows and distribution table entries,
independent of how they are rendered.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from histlog.services.histogram.accumulator import CumulativeView
    from histlog.services.histogram.base import Histogram


INTERVAL_PERCENTILES = (50.0, 90.0)
TOTAL_PERCENTILES = (50.0, 90.0, 99.0, 99.9, 99.99)


@dataclass(frozen=True)
class IntervalRow:
    """
    One row of the interval percentile log.

    Values are already scaled by the output value unit ratio.
    """

    elapsed_sec: float

    # Values recorded during the interval
    interval_count: int
    interval_p50: float
    interval_p90: float
    interval_max: float

    # Values recorded from the beginning until now
    total_count: int
    total_p50: float
    total_p90: float
    total_p99: float
    total_p999: float
    total_p9999: float
    total_max: float

    def __post_init__(self):
        """Validate row counts."""
        if self.interval_count < 0:
            raise ValueError(f"interval_count must be non-negative, got {self.interval_count}")
        if self.total_count < self.interval_count:
            raise ValueError(
                f"total_count ({self.total_count}) must be at least "
                f"interval_count ({self.interval_count})"
            )

    @classmethod
    def from_histograms(
        cls,
        elapsed_sec: float,
        interval: 'Histogram',
        cumulative: 'CumulativeView',
        unit_ratio: float
    ) -> 'IntervalRow':
        """
        Build a row from an interval histogram and the cumulative view.

        Args:
            elapsed_sec: Interval end relative to the reference start time
            interval: Histogram of the interval just merged
            cumulative: Cumulative view including that interval
            unit_ratio: Divisor applied to every reported value

        Returns:
            IntervalRow with scaled values
        """
        int_p50, int_p90 = (interval.value_at_percentile(p) / unit_ratio
                            for p in INTERVAL_PERCENTILES)
        tot_p50, tot_p90, tot_p99, tot_p999, tot_p9999 = (
            cumulative.value_at_percentile(p) / unit_ratio for p in TOTAL_PERCENTILES
        )
        return cls(
            elapsed_sec=elapsed_sec,
            interval_count=interval.total_count,
            interval_p50=int_p50,
            interval_p90=int_p90,
            interval_max=interval.max_value / unit_ratio,
            total_count=cumulative.total_count,
            total_p50=tot_p50,
            total_p90=tot_p90,
            total_p99=tot_p99,
            total_p999=tot_p999,
            total_p9999=tot_p9999,
            total_max=cumulative.max_value / unit_ratio,
        )

    def as_tuple(self) -> tuple:
        """Row fields in output column order."""
        return (
            self.elapsed_sec,
            self.interval_count, self.interval_p50, self.interval_p90, self.interval_max,
            self.total_count, self.total_p50, self.total_p90, self.total_p99,
            self.total_p999, self.total_p9999, self.total_max,
        )


@dataclass(frozen=True)
class PercentilePoint:
    """One step of a percentile distribution, in raw (unscaled) units."""

    value: float
    percentile: float
    total_count: int

    def __post_init__(self):
        """Validate percentile point."""
        if not 0.0 <= self.percentile <= 100.0:
            raise ValueError(f"percentile must be within [0, 100], got {self.percentile}")
        if self.total_count < 0:
            raise ValueError(f"total_count must be non-negative, got {self.total_count}")

    @property
    def is_last(self) -> bool:
        """Check if this is the terminal (100th percentile) point."""
        return self.percentile >= 100.0
