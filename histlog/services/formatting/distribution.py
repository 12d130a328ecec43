"""
Percentile distribution renderers.

Render the final cumulative histogram as an HdrHistogram-style
percentile table (``.hgrm``), in plain or CSV layout.
"""

from abc import ABC, abstractmethod
from typing import TextIO

from histlog.domain.rows import PercentilePoint
from histlog.services.histogram.base import Histogram


class DistributionRenderer(ABC):
    """
    Base class for distribution table renderers.

    Subclasses provide the header, row and footer layout; the iteration
    over the histogram's percentile points is shared.
    """

    def __init__(self, significant_digits: int):
        """
        Initialize renderer.

        Args:
            significant_digits: Decimal places used for values
        """
        if significant_digits < 0:
            raise ValueError(f"significant_digits must be non-negative, got {significant_digits}")
        self.significant_digits = significant_digits

    def write(
        self,
        sink: TextIO,
        histogram: Histogram,
        ticks_per_half_distance: int,
        unit_ratio: float
    ) -> int:
        """
        Write the full distribution table to ``sink``.

        Args:
            sink: Destination text stream
            histogram: Histogram to render
            ticks_per_half_distance: Table resolution
            unit_ratio: Divisor applied to every value

        Returns:
            Number of percentile rows written
        """
        sink.write(self.header())

        rows = 0
        for point in histogram.percentile_points(ticks_per_half_distance):
            sink.write(self.render_point(point, unit_ratio))
            rows += 1

        sink.write(self.footer(histogram, unit_ratio))
        return rows

    @abstractmethod
    def header(self) -> str:
        """Column header."""

    @abstractmethod
    def render_point(self, point: PercentilePoint, unit_ratio: float) -> str:
        """One table row."""

    def footer(self, histogram: Histogram, unit_ratio: float) -> str:
        """Summary lines after the table, none by default."""
        return ""


class PlainDistributionRenderer(DistributionRenderer):
    """Fixed-width table with a commented summary footer."""

    def header(self) -> str:
        return "%12s %14s %10s %14s\n\n" % ("Value", "Percentile", "TotalCount", "1/(1-Percentile)")

    def render_point(self, point: PercentilePoint, unit_ratio: float) -> str:
        value = point.value / unit_ratio
        percentile = point.percentile / 100.0
        if point.is_last:
            return f"%12.{self.significant_digits}f %2.12f %10d\n" % (
                value, percentile, point.total_count)
        return f"%12.{self.significant_digits}f %2.12f %10d %14.2f\n" % (
            value, percentile, point.total_count, 1.0 / (1.0 - percentile))

    def footer(self, histogram: Histogram, unit_ratio: float) -> str:
        digits = self.significant_digits
        lines = [
            f"#[Mean    = %12.{digits}f, StdDeviation   = %12.{digits}f]\n" % (
                histogram.mean_value / unit_ratio, histogram.stddev / unit_ratio),
            f"#[Max     = %12.{digits}f, Total count    = %12d]\n" % (
                histogram.max_value / unit_ratio, histogram.total_count),
            "#[Buckets = %12d, SubBuckets     = %12d]\n" % (
                histogram.bucket_count, histogram.sub_bucket_count),
        ]
        return "".join(lines)


class CsvDistributionRenderer(DistributionRenderer):
    """Comma-separated table; the terminal row reports Infinity."""

    def header(self) -> str:
        return '"Value","Percentile","TotalCount","1/(1-Percentile)"\n'

    def render_point(self, point: PercentilePoint, unit_ratio: float) -> str:
        value = point.value / unit_ratio
        percentile = point.percentile / 100.0
        if point.is_last:
            return f"%.{self.significant_digits}f,%.12f,%d,Infinity\n" % (
                value, percentile, point.total_count)
        return f"%.{self.significant_digits}f,%.12f,%d,%.2f\n" % (
            value, percentile, point.total_count, 1.0 / (1.0 - percentile))
