"""
Processor context.

Immutable snapshot of one aggregation pass, handed from state to state.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Any, TextIO
from datetime import datetime

from histlog.domain.config import ProcessorConfig
from histlog.domain.intervals import TimeWindow
from histlog.domain.statistics import RunStatistics
from histlog.services.formatting import OutputFormat
from histlog.services.histogram.accumulator import HistogramAccumulator
from histlog.services.log_reader import IntervalSource
from histlog.services.sinks import OutputSinks
from .states import ProcessorState


@dataclass(frozen=True)
class PipelineContext:
    """
    State of one aggregation pass.

    Handlers never mutate a context; they return an updated copy. The
    resources attached during INIT (reader, accumulator, sinks) are the
    pass's single instances and are shared by every copy.
    """

    config: ProcessorConfig
    current_state: ProcessorState
    started_at: datetime = field(default_factory=datetime.now)

    # Opened by INIT, released by the executor
    reader: Optional[IntervalSource] = None
    input_stream: Optional[TextIO] = None
    accumulator: Optional[HistogramAccumulator] = None
    sinks: Optional[OutputSinks] = None
    output_format: Optional[OutputFormat] = None
    progress: Optional[Any] = None

    # Set at most once, from the reader's first non-zero start time
    reference_start_time: Optional[float] = None
    legend_written: bool = False
    stats: RunStatistics = field(default_factory=RunStatistics)

    error_message: Optional[str] = None
    error_details: Optional[dict] = None

    def with_state(self, new_state: ProcessorState) -> 'PipelineContext':
        return replace(self, current_state=new_state)

    def with_resources(self, **resources) -> 'PipelineContext':
        """Attach any of reader, input_stream, accumulator, sinks, output_format, progress."""
        return replace(self, **resources)

    def with_reference_start_time(self, start_time_sec: float) -> 'PipelineContext':
        """Latch the reference start time; once set, later values are ignored."""
        if self.reference_start_time is not None:
            return self
        return replace(self, reference_start_time=start_time_sec)

    def with_legend_written(self) -> 'PipelineContext':
        return replace(self, legend_written=True)

    def with_interval_recorded(self, row_written: bool) -> 'PipelineContext':
        """
        Count one merged interval.

        The running value count is taken from the accumulator, so it must
        be called after the interval has been merged.
        """
        return replace(
            self,
            stats=self.stats.with_interval(self.accumulator.total_count, row_written),
        )

    def fail(self, message: str, **details) -> 'PipelineContext':
        """Move to FAILED, keeping the message and any details for the caller."""
        return replace(
            self,
            current_state=ProcessorState.FAILED,
            error_message=message,
            error_details=details,
        )

    def elapsed_since_start(self, timestamp_sec: float) -> float:
        """Seconds from the reference start time (0.0 until latched) to ``timestamp_sec``."""
        return timestamp_sec - (self.reference_start_time or 0.0)

    @property
    def window(self) -> TimeWindow:
        """Configured time window."""
        return TimeWindow(self.config.range_start_sec, self.config.range_end_sec)

    @property
    def run_seconds(self) -> float:
        """Wall-clock seconds since the pass started."""
        return (datetime.now() - self.started_at).total_seconds()

    @property
    def is_terminal(self) -> bool:
        return self.current_state.is_terminal()

    @property
    def is_successful(self) -> bool:
        return self.current_state == ProcessorState.DONE

    @property
    def has_error(self) -> bool:
        return self.current_state == ProcessorState.FAILED

    def get_summary(self) -> dict:
        """Flat summary of the pass, for logging."""
        return {
            "state": str(self.current_state),
            "run_seconds": round(self.run_seconds, 3),
            "reference_start_time": self.reference_start_time,
            **self.stats.to_dict(),
            "error_message": self.error_message,
        }
