"""
AwaitingFirstIntervalHandler - Handles the AWAITING_FIRST_INTERVAL state.

Pulls intervals until the log's start time becomes known.
"""

from histlog.orchestration.context import PipelineContext
from histlog.orchestration.states import ProcessorState
from .base import IntervalStateHandler


class AwaitingFirstIntervalHandler(IntervalStateHandler):
    """
    Handler for AWAITING_FIRST_INTERVAL state.

    Every pulled interval is merged and gets its row. The first one for
    which the reader reports a non-zero start time latches the reference
    start time and moves the pass to STREAMING. An empty (or fully
    filtered) log goes straight to FINALIZING.
    """

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, ProcessorState]:
        self._log_state_entry(context)

        next_state = ProcessorState.FINALIZING
        while True:
            interval = self._pull(context)
            if interval is None:
                self.logger.info("End of input before a start time was observed")
                break

            context.accumulator.merge(interval)
            context = self._latch_start_time(context)
            context = self._emit_row(context, interval)

            if context.reference_start_time is not None:
                next_state = ProcessorState.STREAMING
                break

        self._log_state_exit(context, next_state)
        return context, next_state
