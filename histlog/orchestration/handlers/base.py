"""
Base state handlers.

Abstract base class for all state handlers, plus the shared per-interval
work of the two pulling states.
"""

from abc import ABC, abstractmethod
import logging
from typing import Optional

from histlog.domain.intervals import IntervalHistogram
from histlog.domain.rows import IntervalRow
from histlog.orchestration.context import PipelineContext
from histlog.orchestration.states import ProcessorState
from histlog.services.formatting import format_start_time


class StateHandler(ABC):
    """
    Base class for state handlers.

    Each state handler implements the logic for transitioning
    from one state to the next.
    """

    def __init__(self):
        """Initialize state handler."""
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def handle(self, context: PipelineContext) -> tuple[PipelineContext, ProcessorState]:
        """
        Handle the current state and determine next state.

        Args:
            context: Current processor context

        Returns:
            Tuple of (updated_context, next_state)

        Raises:
            Exception: If state handling fails
        """

    def _log_state_entry(self, context: PipelineContext):
        """Log entry to state."""
        self.logger.info(f"Entering state: {context.current_state}")

    def _log_state_exit(self, context: PipelineContext, next_state: ProcessorState):
        """Log exit from state."""
        self.logger.info(
            f"Exiting state: {context.current_state} → {next_state}"
        )


class IntervalStateHandler(StateHandler):
    """
    Base class for states that pull intervals from the reader.

    Provides pulling, start time latching and interval row emission.
    """

    def _pull(self, context: PipelineContext) -> Optional[IntervalHistogram]:
        """Pull the next in-window interval, None at end of input."""
        interval = context.reader.next_interval(context.window)
        if interval is not None and context.progress is not None:
            context.progress.update(1)
        return interval

    def _latch_start_time(self, context: PipelineContext) -> PipelineContext:
        """
        Latch the reader's start time once it is known.

        Writes the StartTime header to every existing sink the first
        time a non-zero start time is seen.
        """
        if context.reference_start_time is not None:
            return context

        start_time_sec = context.reader.start_time_sec
        if start_time_sec == 0.0:
            return context

        context = context.with_reference_start_time(start_time_sec)
        header = format_start_time(start_time_sec)
        for sink in context.sinks.existing():
            sink.write(header)

        self.logger.info(f"Reference start time: {start_time_sec:.3f}")
        return context

    def _emit_row(self, context: PipelineContext, interval: IntervalHistogram) -> PipelineContext:
        """Write the interval's row (and the legend before the first one)."""
        sinks = context.sinks
        row_written = False

        if sinks.has_interval_log:
            rows = context.output_format.rows
            if not context.legend_written:
                sinks.interval_log.write(rows.legend())
                context = context.with_legend_written()

            elapsed_sec = context.elapsed_since_start(interval.end_timestamp_sec)
            row = IntervalRow.from_histograms(
                elapsed_sec,
                interval.histogram,
                context.accumulator.cumulative_view,
                context.config.output_value_unit_ratio,
            )
            sinks.interval_log.write(rows.render(row))
            row_written = True

        return context.with_interval_recorded(row_written)
