"""
IntervalLogReader service - Reads interval histograms from a histogram log.

Single responsibility: Turn lines of a textual histogram log into
IntervalHistogram objects, one pull at a time, honoring a time window.
No accumulation, no output.

Log layout::

    #[StartTime: 1441812279.474 (seconds since epoch), Wed Sep 09 08:24:39 PDT 2015]
    #[BaseTime: 0.000 (seconds since epoch)]
    "StartTimestamp","Interval_Length","Interval_Max","Interval_Compressed_Histogram"
    [Tag=<tag>,]<start>,<length>,<max>,<base64 compressed histogram>
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional

from histlog.domain.intervals import IntervalHistogram, TimeWindow
from histlog.services.histogram.base import Histogram
from histlog.services.histogram.hdr_adapter import HdrHistogramAdapter


logger = logging.getLogger(__name__)

_START_TIME_RE = re.compile(r"^#\[StartTime:\s*([-+0-9.eE]+)")
_BASE_TIME_RE = re.compile(r"^#\[BaseTime:\s*([-+0-9.eE]+)")
_LEGEND_PREFIX = '"StartTimestamp"'
_TAG_PREFIX = "Tag="

# Timestamps further than this before the start time are taken as relative
_RELATIVE_TIMESTAMP_THRESHOLD_SEC = 365 * 24 * 3600.0

# Marker for a data line that lies before the time window
_SKIP = object()


class IntervalSource(ABC):
    """Pull-based source of interval histograms."""

    @abstractmethod
    def next_interval(self, window: TimeWindow) -> Optional[IntervalHistogram]:
        """
        Pull the next interval that falls within ``window``.

        Returns:
            The next interval, or None at end of input. End of input also
            covers anything the source could not decode.
        """

    @property
    @abstractmethod
    def start_time_sec(self) -> float:
        """Log start time in seconds since epoch, 0.0 until known."""


class IntervalLogReader(IntervalSource):
    """
    Reader for textual histogram logs.

    Works on any iterable of lines (an open file, ``sys.stdin``, a list).
    Decode problems are logged and reported as end of input; nothing
    partial is ever returned.
    """

    def __init__(
        self,
        lines: Iterable[str],
        decoder: Callable[[str], Histogram] = HdrHistogramAdapter.decode
    ):
        """
        Initialize reader.

        Args:
            lines: Log lines, consumed lazily
            decoder: Turns a base64 compressed payload into a Histogram
        """
        self._lines = iter(lines)
        self._decoder = decoder
        self._line_number = 0

        self._start_time_sec = 0.0
        self._observed_start_time = False
        self._base_time_sec = 0.0
        self._observed_base_time = False

    @property
    def start_time_sec(self) -> float:
        return self._start_time_sec

    def next_interval(self, window: TimeWindow) -> Optional[IntervalHistogram]:
        for raw_line in self._lines:
            self._line_number += 1
            line = raw_line.strip()

            if not line:
                continue
            if line.startswith("#"):
                self._parse_comment(line)
                continue
            if line.startswith(_LEGEND_PREFIX):
                continue

            interval = self._parse_interval_line(line, window)
            if interval is _SKIP:
                continue
            return interval

        return None

    def _parse_interval_line(self, line: str, window: TimeWindow) -> Optional[IntervalHistogram]:
        """Parse one data line, skipping it if it lies before the window."""
        fields = line.split(",")

        # Tags are accepted and ignored
        if fields[0].startswith(_TAG_PREFIX):
            fields = fields[1:]

        if len(fields) != 4:
            logger.warning(
                f"Line {self._line_number}: expected 4 fields, got {len(fields)}; "
                f"treating as end of input"
            )
            return None

        try:
            log_timestamp_sec = float(fields[0])
            interval_length_sec = float(fields[1])
        except ValueError as e:
            logger.warning(f"Line {self._line_number}: bad timestamp ({e}); treating as end of input")
            return None
        if not interval_length_sec >= 0.0:
            logger.warning(
                f"Line {self._line_number}: bad interval length {fields[1]}; treating as end of input"
            )
            return None

        if not self._observed_start_time:
            # No explicit start time noted, use the first observed one
            self._start_time_sec = log_timestamp_sec
            self._observed_start_time = True

        if not self._observed_base_time:
            if log_timestamp_sec < self._start_time_sec - _RELATIVE_TIMESTAMP_THRESHOLD_SEC:
                self._base_time_sec = self._start_time_sec
            else:
                self._base_time_sec = 0.0
            self._observed_base_time = True

        absolute_start_sec = log_timestamp_sec + self._base_time_sec
        offset_start_sec = absolute_start_sec - self._start_time_sec

        if window.is_before(offset_start_sec):
            return _SKIP
        if window.is_past(offset_start_sec):
            logger.debug(f"Line {self._line_number}: offset {offset_start_sec:.3f}s past range end")
            return None

        try:
            histogram = self._decoder(fields[3])
        except Exception as e:
            logger.warning(
                f"Line {self._line_number}: failed to decode histogram "
                f"({type(e).__name__}: {e}); treating as end of input"
            )
            return None

        return IntervalHistogram(
            histogram=histogram,
            start_timestamp_ms=absolute_start_sec * 1000.0,
            end_timestamp_ms=(absolute_start_sec + interval_length_sec) * 1000.0,
        )

    def _parse_comment(self, line: str):
        """Pick up StartTime / BaseTime headers, ignore other comments."""
        for pattern, attr in ((_START_TIME_RE, "start"), (_BASE_TIME_RE, "base")):
            match = pattern.match(line)
            if not match:
                continue
            try:
                value = float(match.group(1))
            except ValueError:
                logger.warning(f"Line {self._line_number}: unreadable {attr} time header ignored")
                return

            if attr == "start":
                self._start_time_sec = value
                self._observed_start_time = True
            else:
                self._base_time_sec = value
                self._observed_base_time = True
            return
