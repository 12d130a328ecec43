"""
Histogram capability.

Abstract base class for the value-count histograms the processor merges
and queries. Production code uses the HdrHistogram-backed implementation;
any container honoring this contract can be injected instead.
"""

from abc import ABC, abstractmethod
from typing import Iterator

from histlog.domain.rows import PercentilePoint


class Histogram(ABC):
    """
    Base class for histogram containers.

    Implementations must support in-place merging of another histogram
    of the same implementation and the read queries used for reporting.
    """

    @abstractmethod
    def add(self, other: 'Histogram') -> None:
        """
        Merge all recorded values of ``other`` into this histogram.

        Args:
            other: Histogram to merge from
        """

    @property
    @abstractmethod
    def total_count(self) -> int:
        """Total number of recorded values."""

    @property
    @abstractmethod
    def max_value(self) -> float:
        """Largest recorded value, 0 when empty."""

    @abstractmethod
    def value_at_percentile(self, percentile: float) -> float:
        """
        Smallest recorded value V such that ``percentile`` % of values are <= V.

        Args:
            percentile: Percentile in [0, 100]

        Returns:
            Value at the percentile, 0 when empty
        """

    @property
    @abstractmethod
    def mean_value(self) -> float:
        """Mean of recorded values, 0 when empty."""

    @property
    @abstractmethod
    def stddev(self) -> float:
        """Standard deviation of recorded values, 0 when empty."""

    @abstractmethod
    def percentile_points(self, ticks_per_half_distance: int) -> Iterator[PercentilePoint]:
        """
        Iterate the percentile distribution.

        Yields nothing for an empty histogram. The final point, when any,
        is at the 100th percentile.

        Args:
            ticks_per_half_distance: Reporting steps per halving of the
                remaining distance to 100%
        """

    @property
    @abstractmethod
    def bucket_count(self) -> int:
        """Number of value buckets in the internal layout."""

    @property
    @abstractmethod
    def sub_bucket_count(self) -> int:
        """Number of sub-buckets per bucket in the internal layout."""
