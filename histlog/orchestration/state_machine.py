"""
State machine for the aggregation pass.

Runs the handler registered for the current state, validates the move it
asks for, and checks the pass invariants every time a state is left.
"""

import logging
from typing import Dict, Optional

from .context import PipelineContext
from .states import ProcessorState, is_valid_transition
from .handlers.base import StateHandler


def exit_violation(
    before: PipelineContext,
    after: PipelineContext,
    next_state: ProcessorState
) -> Optional[str]:
    """
    Check what a handler did to the context against the pass invariants.

    Args:
        before: Context the handler was given
        after: Context the handler returned
        next_state: State the handler asked to move to

    Returns:
        Description of the first violated invariant, None if all hold
    """
    if before.reference_start_time is not None and after.reference_start_time != before.reference_start_time:
        return (f"reference start time changed from {before.reference_start_time} "
                f"to {after.reference_start_time} after latching")

    if before.legend_written and not after.legend_written:
        return "interval log legend flag was reset"

    if (after.stats.intervals_read < before.stats.intervals_read
            or after.stats.total_count < before.stats.total_count):
        return "run statistics went backwards"

    if after.accumulator is not None and after.stats.total_count != after.accumulator.total_count:
        return (f"statistics count {after.stats.total_count} does not match "
                f"accumulated count {after.accumulator.total_count}")

    if next_state == ProcessorState.STREAMING and after.reference_start_time is None:
        return "streaming requested before the start time was latched"

    return None


class StateMachine:
    """
    Drives one aggregation pass from INIT to DONE or FAILED.

    A pass visits each of the four working states at most once, so the
    step limit only guards against a handler that keeps re-entering a
    state.
    """

    def __init__(self, handlers: Dict[ProcessorState, StateHandler], max_iterations: int = 8):
        """
        Initialize state machine.

        Args:
            handlers: Dict mapping states to their handlers
            max_iterations: Upper bound on handler invocations
        """
        self.handlers = handlers
        self.max_iterations = max_iterations
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self, context: PipelineContext) -> PipelineContext:
        """
        Run handlers until a terminal state is reached.

        Args:
            context: Context in INIT state

        Returns:
            Final context, DONE or FAILED
        """
        self.logger.info(f"Processing {context.config.input_file or '<stdin>'}")

        steps = 0
        while not context.is_terminal:
            if steps == self.max_iterations:
                context = context.fail("Processing exceeded maximum iterations", steps=steps)
                break
            steps += 1
            context = self._step(context, steps)

        self._log_outcome(context)
        return context

    def _step(self, context: PipelineContext, step: int) -> PipelineContext:
        """Run the current state's handler and apply the state it asks for."""
        state = context.current_state

        handler = self.handlers.get(state)
        if handler is None:
            self.logger.error(f"No handler for state {state}")
            return context.fail(f"No handler registered for state {state}", state=str(state))

        try:
            updated, next_state = handler.handle(context)
        except Exception as e:
            self.logger.error(f"Error in state {state}: {e}", exc_info=True)
            return context.fail(
                f"Error in {state}: {e}",
                state=str(state),
                step=step,
                error_type=type(e).__name__,
            )

        if not is_valid_transition(state, next_state):
            self.logger.error(f"Invalid transition: {state} → {next_state}")
            return updated.fail(f"Invalid state transition: {state} → {next_state}", state=str(state))

        violation = exit_violation(context, updated, next_state)
        if violation is not None:
            self.logger.error(f"Invariant violated leaving {state}: {violation}")
            return updated.fail(f"Invariant violated leaving {state}: {violation}", state=str(state))

        self.logger.info(
            f"{state} → {next_state} "
            f"({updated.stats.intervals_read} interval(s), {updated.stats.total_count} value(s))"
        )
        return updated.with_state(next_state)

    def _log_outcome(self, context: PipelineContext):
        summary = ", ".join(f"{key}={value}" for key, value in context.get_summary().items())
        if context.is_successful:
            self.logger.info(f"Histogram log processing completed: {summary}")
        else:
            self.logger.error(f"Histogram log processing failed: {summary}")
