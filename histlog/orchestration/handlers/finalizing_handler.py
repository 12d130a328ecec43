"""
FinalizingHandler - Handles the FINALIZING state.

Writes the overall percentile distribution of the accumulated histogram.
"""

from histlog.orchestration.context import PipelineContext
from histlog.orchestration.states import ProcessorState
from .base import StateHandler


class FinalizingHandler(StateHandler):
    """Handler for FINALIZING state."""

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, ProcessorState]:
        self._log_state_entry(context)

        if context.progress is not None:
            context.progress.close()

        config = context.config
        rows = context.output_format.distribution.write(
            context.sinks.percentile_log,
            context.accumulator.histogram,
            config.ticks_per_half_distance,
            config.output_value_unit_ratio,
        )
        self.logger.info(
            f"Wrote percentile distribution: {rows} row(s), "
            f"total count {context.accumulator.total_count}"
        )

        next_state = ProcessorState.DONE
        self._log_state_exit(context, next_state)
        return context, next_state
