"""
HdrHistogram-backed histogram.

Wraps ``hdrh.histogram.HdrHistogram`` behind the Histogram capability.
Values stay in the raw recorded unit (typically nanoseconds); scaling to
display units is done by the report renderers.
"""

from typing import Iterator, Union

from hdrh.histogram import HdrHistogram  # type: ignore[import-untyped]

from histlog.domain.config import HistogramConfig
from histlog.domain.rows import PercentilePoint
from .base import Histogram


class HdrHistogramAdapter(Histogram):
    """Histogram implementation delegating to an HdrHistogram instance."""

    def __init__(self, histogram: HdrHistogram):
        self._histogram = histogram

    @classmethod
    def create(cls, config: HistogramConfig) -> 'HdrHistogramAdapter':
        """Create an empty histogram from construction parameters."""
        return cls(HdrHistogram(
            config.lowest_trackable_value,
            config.highest_trackable_value,
            config.significant_digits,
        ))

    @classmethod
    def decode(cls, payload: Union[str, bytes]) -> 'HdrHistogramAdapter':
        """
        Decode a base64 compressed histogram payload as found in log files.

        Raises whatever the underlying decoder raises on malformed input.
        """
        if isinstance(payload, str):
            payload = payload.encode("ascii")
        return cls(HdrHistogram.decode(payload))

    @property
    def hdr_histogram(self) -> HdrHistogram:
        """Underlying HdrHistogram instance."""
        return self._histogram

    def record_value(self, value: int, count: int = 1) -> bool:
        """Record ``count`` occurrences of ``value``."""
        return bool(self._histogram.record_value(value, count))

    def encode(self) -> str:
        """Encode as a base64 compressed payload."""
        return self._histogram.encode().decode("ascii")

    def add(self, other: Histogram) -> None:
        if not isinstance(other, HdrHistogramAdapter):
            raise TypeError(
                f"Cannot merge {type(other).__name__} into {type(self).__name__}"
            )
        self._histogram.add(other._histogram)

    @property
    def total_count(self) -> int:
        return int(self._histogram.get_total_count())

    @property
    def max_value(self) -> float:
        if self.total_count == 0:
            return 0
        return self._histogram.get_max_value()

    def value_at_percentile(self, percentile: float) -> float:
        if self.total_count == 0:
            return 0
        return self._histogram.get_value_at_percentile(percentile)

    @property
    def mean_value(self) -> float:
        if self.total_count == 0:
            return 0.0
        return float(self._histogram.get_mean_value())

    @property
    def stddev(self) -> float:
        if self.total_count == 0:
            return 0.0
        return float(self._histogram.get_stddev())

    def percentile_points(self, ticks_per_half_distance: int) -> Iterator[PercentilePoint]:
        if self.total_count == 0:
            return
        for step in self._histogram.get_percentile_iterator(ticks_per_half_distance):
            yield PercentilePoint(
                value=step.value_iterated_to,
                percentile=min(step.percentile_level_iterated_to, 100.0),
                total_count=step.total_count_to_this_value,
            )

    @property
    def bucket_count(self) -> int:
        return int(self._histogram.bucket_count)

    @property
    def sub_bucket_count(self) -> int:
        return int(self._histogram.sub_bucket_count)
