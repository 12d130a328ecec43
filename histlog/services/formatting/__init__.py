"""
Formatting services.

Row, header and distribution rendering for the two report streams.
"""

from dataclasses import dataclass

from .row_renderers import RowRenderer, PlainRowRenderer, CsvRowRenderer
from .distribution import (
    DistributionRenderer,
    PlainDistributionRenderer,
    CsvDistributionRenderer,
)
from .headers import (
    INTERVAL_LOG_TITLE,
    PERCENTILE_REPORT_TITLE,
    format_time_range,
    format_start_time,
)


@dataclass(frozen=True)
class OutputFormat:
    """Renderers for one run; plain and CSV are never mixed."""

    rows: RowRenderer
    distribution: DistributionRenderer
    csv: bool


def build_output_format(csv: bool, significant_digits: int) -> OutputFormat:
    """
    Select the renderers for a run.

    Args:
        csv: Use CSV layout instead of fixed-width text
        significant_digits: Decimal places for distribution values

    Returns:
        OutputFormat bundle
    """
    if csv:
        return OutputFormat(
            rows=CsvRowRenderer(),
            distribution=CsvDistributionRenderer(significant_digits),
            csv=True,
        )
    return OutputFormat(
        rows=PlainRowRenderer(),
        distribution=PlainDistributionRenderer(significant_digits),
        csv=False,
    )


__all__ = [
    "OutputFormat",
    "build_output_format",
    "RowRenderer",
    "PlainRowRenderer",
    "CsvRowRenderer",
    "DistributionRenderer",
    "PlainDistributionRenderer",
    "CsvDistributionRenderer",
    "INTERVAL_LOG_TITLE",
    "PERCENTILE_REPORT_TITLE",
    "format_time_range",
    "format_start_time",
]
