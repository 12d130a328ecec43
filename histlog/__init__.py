"""
histlog: interval histogram log processor.

Turns a recorded interval histogram log into an interval percentile log
and an overall percentile distribution report.
"""

try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("histlog-processor")
except Exception:
    __version__ = "0+unknown"
