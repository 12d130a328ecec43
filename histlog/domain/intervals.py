"""
Interval domain models.

Time window selection and decoded interval histograms.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from histlog.services.histogram.base import Histogram


@dataclass(frozen=True)
class TimeWindow:
    """
    Inclusive [start_sec, end_sec] range along the log's elapsed time axis.

    Offsets are seconds relative to the log's start time. Bounds are
    taken as given; when end_sec < start_sec no offset is admitted.
    """

    start_sec: float = 0.0
    end_sec: float = float("inf")

    def is_before(self, offset_sec: float) -> bool:
        """Check if an offset lies before the window."""
        return offset_sec < self.start_sec

    def is_past(self, offset_sec: float) -> bool:
        """Check if an offset lies past the end of the window."""
        return offset_sec > self.end_sec

    def contains(self, offset_sec: float) -> bool:
        """Check if an offset lies within the window."""
        return not self.is_before(offset_sec) and not self.is_past(offset_sec)


@dataclass(frozen=True)
class IntervalHistogram:
    """
    One decoded interval of a histogram log.

    Timestamps are absolute, in milliseconds since the Unix epoch
    (or since the log's own epoch when it carries relative times).
    """

    histogram: 'Histogram'
    start_timestamp_ms: float
    end_timestamp_ms: float

    def __post_init__(self):
        """Validate interval timestamps."""
        if self.end_timestamp_ms < self.start_timestamp_ms:
            raise ValueError(
                f"end_timestamp_ms ({self.end_timestamp_ms}) must not precede "
                f"start_timestamp_ms ({self.start_timestamp_ms})"
            )

    @property
    def end_timestamp_sec(self) -> float:
        """Interval end timestamp in seconds."""
        return self.end_timestamp_ms / 1000.0
