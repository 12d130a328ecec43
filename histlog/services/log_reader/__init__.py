"""
Log reading services.

Services responsible for decoding interval histograms out of a log stream.
"""

from .interval_log_reader import IntervalSource, IntervalLogReader

__all__ = ["IntervalSource", "IntervalLogReader"]
