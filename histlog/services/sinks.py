"""
OutputSinks service - Opens the two report destinations.

Single responsibility: Own the interval log and percentile report
streams for one run. Opening an output file may fail without aborting
the run; the failure is logged and that destination is dropped (the
percentile report falls back to standard output).
"""

import logging
from typing import Optional, TextIO

from histlog.domain.config import ProcessorConfig
from histlog.services.formatting.headers import (
    INTERVAL_LOG_TITLE,
    PERCENTILE_REPORT_TITLE,
    format_time_range,
)


logger = logging.getLogger(__name__)


class OutputSinks:
    """Interval log (optional) and percentile report (always present) streams."""

    def __init__(self, interval_log: Optional[TextIO], percentile_log: TextIO, owned: tuple = ()):
        """
        Args:
            interval_log: Destination for interval rows, None for no interval log
            percentile_log: Destination for the final distribution
            owned: Streams opened here and closed by ``close``
        """
        self.interval_log = interval_log
        self.percentile_log = percentile_log
        self._owned = tuple(owned)

    @property
    def has_interval_log(self) -> bool:
        return self.interval_log is not None

    def existing(self) -> list[TextIO]:
        """All present sinks, percentile report first."""
        sinks = [self.percentile_log]
        if self.interval_log is not None:
            sinks.append(self.interval_log)
        return sinks

    def close(self):
        """Close streams opened by ``open``; borrowed streams are left open."""
        for stream in self._owned:
            if not stream.closed:
                stream.close()
        self._owned = ()

    @classmethod
    def open(cls, config: ProcessorConfig, stdout: TextIO) -> 'OutputSinks':
        """
        Open the sinks described by the configuration.

        Without an output file only the percentile report is produced,
        on ``stdout``. With one, the interval log goes to the file and the
        report to ``<file>.hgrm``; each gets its time range header.

        Args:
            config: Processor configuration (output file already expanded)
            stdout: Primary output stream

        Returns:
            OutputSinks for the run
        """
        if config.output_file is None:
            return cls(interval_log=None, percentile_log=stdout)

        owned = []
        interval_log = _open_sink(config.output_file, "output file")
        if interval_log is not None:
            owned.append(interval_log)
            interval_log.write(format_time_range(
                INTERVAL_LOG_TITLE, config.range_start_sec, config.range_end_sec))

        percentile_log = _open_sink(config.percentile_report_file, "percentiles histogram output file")
        if percentile_log is not None:
            owned.append(percentile_log)
            percentile_log.write(format_time_range(
                PERCENTILE_REPORT_TITLE, config.range_start_sec, config.range_end_sec))
        else:
            percentile_log = stdout

        return cls(interval_log=interval_log, percentile_log=percentile_log, owned=tuple(owned))


def _open_sink(path: str, description: str) -> Optional[TextIO]:
    """Open a file for writing, logging and returning None on failure."""
    try:
        return open(path, "w", encoding="utf-8", newline="\n")
    except OSError as e:
        logger.error(f"Failed to open {description} {path}: {e}")
        return None
