"""
Interval log row renderers.

One renderer per output format, selected once per run. All numbers are
formatted with ``%`` interpolation, which always uses a decimal point.
"""

from abc import ABC, abstractmethod

from histlog.domain.rows import IntervalRow


class RowRenderer(ABC):
    """Renders the legend and data rows of the interval log."""

    @abstractmethod
    def legend(self) -> str:
        """Column legend line, written once before the first row."""

    @abstractmethod
    def render(self, row: IntervalRow) -> str:
        """Render one row, including the trailing newline."""


class PlainRowRenderer(RowRenderer):
    """Fixed-width rows with I:/T: group labels."""

    LEGEND = ("Time: IntervalPercentiles:count ( 50% 90% Max ) "
              "TotalPercentiles:count ( 50% 90% 99% 99.9% 99.99% Max )\n")
    ROW_FORMAT = ("%4.3f: I:%d ( %7.3f %7.3f %7.3f ) "
                  "T:%d ( %7.3f %7.3f %7.3f %7.3f %7.3f %7.3f )\n")

    def legend(self) -> str:
        return self.LEGEND

    def render(self, row: IntervalRow) -> str:
        return self.ROW_FORMAT % row.as_tuple()


class CsvRowRenderer(RowRenderer):
    """Unlabeled comma-separated rows under a quoted header."""

    LEGEND = ('"Timestamp","Int_Count","Int_50%","Int_90%","Int_Max","Total_Count",'
              '"Total_50%","Total_90%","Total_99%","Total_99.9%","Total_99.99%","Total_Max"\n')
    ROW_FORMAT = "%.3f,%d,%.3f,%.3f,%.3f,%d,%.3f,%.3f,%.3f,%.3f,%.3f,%.3f\n"

    def legend(self) -> str:
        return self.LEGEND

    def render(self, row: IntervalRow) -> str:
        return self.ROW_FORMAT % row.as_tuple()
