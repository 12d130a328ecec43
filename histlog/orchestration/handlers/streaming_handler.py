"""
StreamingHandler - Handles the STREAMING state.

Merges the remaining intervals and appends their rows.
"""

from histlog.orchestration.context import PipelineContext
from histlog.orchestration.states import ProcessorState
from .base import IntervalStateHandler


class StreamingHandler(IntervalStateHandler):
    """Handler for STREAMING state."""

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, ProcessorState]:
        self._log_state_entry(context)

        interval = self._pull(context)
        while interval is not None:
            context.accumulator.merge(interval)
            context = self._emit_row(context, interval)
            interval = self._pull(context)

        self.logger.info(
            f"End of input after {context.stats.intervals_read} interval(s), "
            f"{context.stats.total_count} value(s)"
        )

        next_state = ProcessorState.FINALIZING
        self._log_state_exit(context, next_state)
        return context, next_state
