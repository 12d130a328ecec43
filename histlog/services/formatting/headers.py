"""
Informational header lines.

``#``-prefixed comment lines written ahead of data so downstream parsers
can skip them.
"""

import logging
import math
from datetime import datetime
from typing import Optional


logger = logging.getLogger(__name__)

INTERVAL_LOG_TITLE = "Interval percentile log"
PERCENTILE_REPORT_TITLE = "Overall percentile distribution"

INFINITE_MARKER = "<Infinite>"


def format_time_range(title: str, range_start_sec: float, range_end_sec: float) -> str:
    """
    Header naming a sink and the configured time range.

    Example:
        format_time_range("Interval percentile log", 0.0, math.inf)
        -> "#[Interval percentile log between 0.000 and <Infinite> seconds (relative to StartTime)]\\n"
    """
    if math.isinf(range_end_sec) and range_end_sec > 0:
        end = INFINITE_MARKER
    else:
        end = "%.3f" % range_end_sec
    return "#[%s between %.3f and %s seconds (relative to StartTime)]\n" % (
        title, range_start_sec, end)


def format_calendar_time(epoch_sec: float) -> Optional[str]:
    """
    Local calendar rendering of an epoch timestamp, e.g. ``Sun Sep 09 01:46:40 UTC 2001``.

    Returns None when the timestamp is outside the range the platform can
    represent (for example a start time logged in milliseconds).
    """
    try:
        local = datetime.fromtimestamp(epoch_sec).astimezone()
    except (ValueError, OverflowError, OSError) as e:
        logger.warning(f"Cannot render start time {epoch_sec!r} as calendar time: {e}")
        return None
    return local.strftime("%a %b %d %H:%M:%S %Z %Y")


def format_start_time(start_time_sec: float) -> str:
    """Header stating the reference start time, raw and (when representable) as calendar time."""
    calendar_time = format_calendar_time(start_time_sec)
    if calendar_time is None:
        return "#[StartTime: %.3f (seconds since epoch)]\n" % start_time_sec
    return "#[StartTime: %.3f (seconds since epoch), %s]\n" % (start_time_sec, calendar_time)
