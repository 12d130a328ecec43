"""
Statistics-related domain models.

Immutable snapshot of what a processing run consumed and produced.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class RunStatistics:
    """Counters for a single processing run."""

    intervals_read: int = 0
    rows_written: int = 0
    total_count: int = 0

    def __post_init__(self):
        """Validate run statistics."""
        if self.intervals_read < 0:
            raise ValueError(f"intervals_read must be non-negative, got {self.intervals_read}")
        if self.rows_written < 0:
            raise ValueError(f"rows_written must be non-negative, got {self.rows_written}")
        if self.rows_written > self.intervals_read:
            raise ValueError(
                f"rows_written ({self.rows_written}) cannot exceed "
                f"intervals_read ({self.intervals_read})"
            )

    def with_interval(self, total_count: int, row_written: bool) -> 'RunStatistics':
        """Return new statistics after one merged interval."""
        return replace(
            self,
            intervals_read=self.intervals_read + 1,
            rows_written=self.rows_written + (1 if row_written else 0),
            total_count=total_count,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "intervals_read": self.intervals_read,
            "rows_written": self.rows_written,
            "total_count": self.total_count,
        }
